"""Filter service - orchestration layer.

Wires the rule store, the config editor, the opener button and the
lifecycle controller together. This is the object a host integration
creates once per page.
"""

from collections.abc import Callable
from typing import Any, Protocol

import structlog

from subfilter.config.settings import Settings, settings as default_settings
from subfilter.exceptions import ConfigCorruptionError
from subfilter.gesture import PressDisambiguator
from subfilter.host import DeferredAction, defer_until_available
from subfilter.lifecycle import LifecycleController
from subfilter.models.navigation import NavigationEvent
from subfilter.models.rule import Rule
from subfilter.storage.base import RuleStore
from subfilter.storage.legacy import LEGACY_FIELDS, dump_rules, load_rules
from subfilter.views.base import FeedDocument

logger = structlog.get_logger()

CORRUPTION_PROMPT = (
    "An error was thrown by the config editor, indicating that your data may be corrupted.\n"
    "Error Message: {error}\n\n"
    "Would you like to clear your saved configs?"
)


class ConfigEditor(Protocol):
    """External rule editor."""

    async def configure(
        self,
        key: str,
        title: str,
        schema: dict[str, Any],
        options: dict[str, Any],
    ) -> Any:
        """Let the user edit the rules stored under ``key``.

        Returns:
            The edited rule list, in any shape ``load_rules`` accepts.

        Raises:
            ConfigCorruptionError: When the stored data cannot be loaded.
        """
        ...


class ControlDock(Protocol):
    """Host container that receives the opener button."""

    def install_opener(
        self,
        on_press: Callable[[], None],
        on_release: Callable[[], None],
    ) -> None:
        """Add the opener button.

        Raises:
            MissingHostError: While the dock is not rendered.
        """
        ...


def field_schema() -> dict[str, Any]:
    """Describe the rule fields for the config editor.

    The top-level entry is the channel pattern; every other rule field is
    listed under ``sub``.

    Reason: the editor hands back one positional ``{value}`` per ``sub``
    entry, so the entries follow ``LEGACY_FIELDS`` exactly and the result
    loads through the legacy migration.
    """
    fields = Rule.model_fields

    def describe(name: str) -> dict[str, Any]:
        info = fields[name]
        return {
            "key": name,
            "label": info.description,
            "type": "boolean" if info.annotation is bool else "string",
            "default": info.default,
        }

    top = describe("source")
    top["sub"] = [describe(name) for name in LEGACY_FIELDS]
    return top


class FilterService:
    """Facade over the filtering engine.

    Reason: a host integration talks to one object; store access, editor
    round trips, gesture timing and lifecycle transitions stay behind it.
    """

    def __init__(
        self,
        document: FeedDocument,
        store: RuleStore,
        editor: ConfigEditor,
        confirm: Callable[[str], bool],
        config: Settings | None = None,
    ):
        """Initialize the service.

        Args:
            document: Feed root.
            store: Persisted value store for rules and the enabled flag.
            editor: External rule editor.
            confirm: Yes/no prompt shown when stored rules are corrupt.
            config: Settings; defaults to the global instance.
        """
        self._document = document
        self._store = store
        self._editor = editor
        self._confirm = confirm
        self._config = config or default_settings
        self._last_good: list[Rule] = []

        self.controller = LifecycleController(
            document,
            self.load_rules,
            store,
            enabled_key=self._config.enabled_key,
        )
        self._gesture = PressDisambiguator(
            on_short=self.open_editor,
            on_long=self.controller.toggle_enabled,
            long_press_seconds=self._config.long_press_seconds,
        )

    @property
    def gesture(self) -> PressDisambiguator:
        return self._gesture

    async def start(self, event: NavigationEvent) -> None:
        """Restore the enabled flag and react to the initial page."""
        await self.controller.restore()
        await self.controller.on_navigation(event)

    async def load_rules(self) -> list[Rule]:
        """Read the stored rules.

        Corrupt data never stops filtering: the last rules that loaded
        successfully stay in effect.
        """
        key = self._config.rules_key
        try:
            rules = load_rules(await self._store.get(key, []), key)
        except ConfigCorruptionError as e:
            logger.warning(
                "Stored rules corrupt, keeping last good rules",
                error=str(e),
                rules=len(self._last_good),
            )
            return list(self._last_good)

        self._last_good = rules
        return rules

    async def save_rules(self, rules: list[Rule]) -> None:
        await self._store.set(self._config.rules_key, dump_rules(rules))
        self._last_good = list(rules)

    async def update_config(self, rules: list[Rule]) -> None:
        """Persist new rules and re-filter the feed with them."""
        await self.save_rules(rules)
        await self.controller.apply_rules(rules)
        logger.info("Rules updated", rules=len(rules))

    async def reset_rules(self) -> None:
        """Clear the stored rules."""
        await self._store.set(self._config.rules_key, [])
        self._last_good = []
        await self.controller.apply_rules([])
        logger.info("Stored rules cleared")

    async def open_editor(self) -> list[Rule] | None:
        """Open the config editor and apply what it returns.

        Returns:
            The new rules, or None when the stored data was corrupt.
        """
        key = self._config.rules_key
        try:
            edited = await self._editor.configure(
                key,
                self._config.editor_title,
                field_schema(),
                {"zIndex": self._config.editor_z_index},
            )
            rules = load_rules(edited, key)
        except ConfigCorruptionError as e:
            logger.error("Config editor failed", error=str(e))
            if self._confirm(CORRUPTION_PROMPT.format(error=e)):
                await self.reset_rules()
            return None

        await self.update_config(rules)
        return rules

    def install_controls(self, dock: ControlDock) -> DeferredAction:
        """Add the opener button, waiting for the dock if necessary."""
        return defer_until_available(
            self._document,
            lambda: dock.install_opener(self._gesture.press, self._gesture.release),
        )

    async def shutdown(self) -> None:
        self._gesture.cancel()
        await self.controller.shutdown()
