"""Front-end port."""

from arthik.ui.interface import UserInterface

__all__ = ["UserInterface"]
