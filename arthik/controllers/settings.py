"""
Settings Controller

Display preferences are stored locally and applied at once by re-rendering
the views they affect; the theme is also sent to the backend when logged
in. Password changes are checked locally before they are sent.
"""

from typing import Callable, Optional, Sequence

import structlog

from arthik.controllers.base import ClientContext, report_failure
from arthik.models.audit import ClientEventBuilder
from arthik.models.preferences import Accent, Preferences, Theme
from arthik.models.views import NoticeLevel
from arthik.services.api.errors import ApiError
from arthik.validation.validator import FormValidationError, validate_password_change


logger = structlog.get_logger(__name__)

Renderer = Callable[[], None]


class SettingsController:
    """Preferences and password."""

    def __init__(
        self,
        ctx: ClientContext,
        amount_views: Sequence[Renderer] = (),
        chart_views: Sequence[Renderer] = (),
    ):
        """
        Args:
            ctx: Client context
            amount_views: Re-render views that show amounts
            chart_views: Re-render views that draw charts
        """
        self._ctx = ctx
        self._amount_views = list(amount_views)
        self._chart_views = list(chart_views)

    @property
    def preferences(self) -> Preferences:
        return self._ctx.preferences.current

    def _rerender(self, views: Sequence[Renderer]) -> None:
        if not self._ctx.state.is_authenticated:
            return
        for render in views:
            render()

    async def change_theme(self, theme: Theme) -> None:
        """Persist the theme locally, then tell the backend (failures only logged)."""
        self._ctx.preferences.set_dark_mode(theme == Theme.DARK)
        self._ctx.audit.log_preference("theme", theme.value)
        self._rerender(self._chart_views)

        if not self._ctx.state.is_authenticated:
            return
        try:
            await self._ctx.gateway.update_settings({"theme": theme.value})
        except ApiError as e:
            logger.warning("theme_sync_failed", error=str(e))

    def toggle_hide_amounts(self, enabled: bool) -> None:
        self._ctx.preferences.set_hide_amounts(enabled)
        self._ctx.audit.log_preference("hide_amounts", enabled)
        self._rerender(self._amount_views)

    def change_accent(self, accent: Accent) -> None:
        self._ctx.preferences.set_accent(accent)
        self._ctx.audit.log_preference("accent", accent.value)
        self._rerender(self._chart_views)

    async def change_password(
        self,
        old_password: str,
        new_password: str,
        confirm_password: Optional[str] = None,
    ) -> bool:
        """
        Change the login password.

        Returns:
            True if the backend accepted the change
        """
        try:
            validate_password_change(old_password, new_password, confirm_password)
            result = await self._ctx.gateway.update_settings(
                {"oldPassword": old_password, "newPassword": new_password}
            )
        except (ApiError, FormValidationError) as e:
            report_failure(self._ctx, e, "change password", "Failed to change password")
            return False

        if not result.success:
            self._ctx.notify(result.error or "Failed to change password.", NoticeLevel.ERROR)
            return False

        self._ctx.audit.log(ClientEventBuilder.password_changed())
        self._ctx.notify(result.message or "Password changed successfully!", NoticeLevel.SUCCESS)
        return True
