"""
Strix CLI - inspect and boot annotated modules from the shell.

Usage:
    strix routes myapp.main:AppModule
    strix graph myapp.main:AppModule
    strix boot myapp.main:AppModule --log-level DEBUG
"""

__version__ = "0.1.0"
__cli_name__ = "strix"


def main():
    """Wrapper to avoid eager import of __main__ which causes warnings with -m."""
    from .__main__ import main as _main
    return _main()
