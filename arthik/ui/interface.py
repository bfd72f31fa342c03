"""
UI Port

The client engine drives any front end through this interface. It pushes
finished view models and notices; it never asks the front end for state,
apart from the yes/no answer of a confirmation prompt.
"""

from abc import ABC, abstractmethod

from arthik.models.views import AnyView, Notice, Screen, Tab, ViewRegion


class UserInterface(ABC):
    """Abstract front end."""

    @abstractmethod
    def show_screen(self, screen: Screen) -> None:
        """Switch between the login screen and the main screen."""
        pass

    @abstractmethod
    def activate_tab(self, tab: Tab) -> None:
        """Deactivate every other tab region and activate `tab`."""
        pass

    @abstractmethod
    def render(self, region: ViewRegion, view: AnyView) -> None:
        """Replace what `region` shows with `view`."""
        pass

    @abstractmethod
    def notify(self, notice: Notice) -> None:
        """Show a blocking message."""
        pass

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """
        Ask the user a yes/no question.

        Returns:
            True only if the user agreed
        """
        pass
