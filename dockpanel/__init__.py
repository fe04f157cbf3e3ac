"""dockpanel: таблица контейнеров Docker с действиями через docker CLI."""

__version__ = "0.1.0"
