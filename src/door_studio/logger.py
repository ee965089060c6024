from rich import pretty
from rich.console import Console
from rich.traceback import install

install(show_locals=False)
pretty.install()

# Shared console used for logging across the app
console = Console()
