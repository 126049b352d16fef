"""Built-in ``assetcache`` commands.

Each module defines a Typer command or sub-app that :mod:`assetcache.app`
registers on the root application.
"""
