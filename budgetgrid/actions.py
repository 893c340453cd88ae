"""Row action dispatch.

The grid exposes a fixed vocabulary of row actions: view, edit, delete,
approve and reject. Each is an optional callback slot. Which actions a
grid offers is decided once, from the callbacks that were supplied and the
grid's presentation mode, and captured in ``ActionCapabilities``; an
affordance is never rendered for a slot without a callback.

Callbacks receive the whole row (and, if they accept it, the row's global
index). The grid never confirms destructive actions and never mutates rows;
callers open their own confirmation modals from the callback.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .log import debug, log_callback_error, warn
from .rows import Row
from .utils.callables import call_flexible
from .view import ActionButton


ActionCallback = Callable[..., Any]


class RowAction(str, Enum):
    """Row-level actions."""

    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def label(self) -> str:
        """Button label / tooltip."""
        return self.value.capitalize()

    @property
    def destructive(self) -> bool:
        """Whether callers should confirm before acting."""
        return self in (RowAction.DELETE, RowAction.REJECT)


class ActionMode(str, Enum):
    """Presentation modes that select the default action set."""

    DEFAULT = "default"
    PENDING = "pending"
    DOCUMENTS = "documents"


# Action categories each mode enables, in display order
MODE_ACTIONS: dict[ActionMode, tuple[RowAction, ...]] = {
    ActionMode.DEFAULT: (RowAction.EDIT, RowAction.DELETE),
    ActionMode.PENDING: (RowAction.VIEW, RowAction.APPROVE, RowAction.REJECT),
    ActionMode.DOCUMENTS: (RowAction.VIEW, RowAction.DELETE),
}


def resolve_action_mode(*, pending: bool = False, documents: bool = False) -> ActionMode:
    """Map the page-level mode flags to an ``ActionMode``. ``pending`` wins."""
    if pending:
        return ActionMode.PENDING
    if documents:
        return ActionMode.DOCUMENTS
    return ActionMode.DEFAULT


class ActionSlots(BaseModel):
    """Optional callbacks, one per row action.

    Accepts both ``on_edit=`` and ``onEdit=`` spellings.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        arbitrary_types_allowed=True,
    )

    on_view: ActionCallback | None = Field(default=None, alias="onView")
    on_edit: ActionCallback | None = Field(default=None, alias="onEdit")
    on_delete: ActionCallback | None = Field(default=None, alias="onDelete")
    on_approve: ActionCallback | None = Field(default=None, alias="onApprove")
    on_reject: ActionCallback | None = Field(default=None, alias="onReject")

    def callback(self, action: RowAction) -> ActionCallback | None:
        """The callback bound to ``action``, if any."""
        return getattr(self, f"on_{action.value}")

    def supplied(self) -> frozenset[RowAction]:
        """Actions that have a callback."""
        return frozenset(a for a in RowAction if self.callback(a) is not None)


class ActionCapabilities(BaseModel):
    """The actions a grid offers, decided once per configuration."""

    model_config = ConfigDict(frozen=True)

    mode: ActionMode = ActionMode.DEFAULT
    actions: tuple[RowAction, ...] = ()

    @classmethod
    def compute(
        cls,
        slots: ActionSlots,
        *,
        show_actions: bool,
        mode: ActionMode = ActionMode.DEFAULT,
    ) -> ActionCapabilities:
        """Actions enabled by ``show_actions``, the mode, and a supplied callback."""
        if not show_actions:
            return cls(mode=mode)
        supplied = slots.supplied()
        return cls(mode=mode, actions=tuple(a for a in MODE_ACTIONS[mode] if a in supplied))

    def allows(self, action: RowAction) -> bool:
        """Whether ``action`` is offered."""
        return action in self.actions

    def __bool__(self) -> bool:
        return bool(self.actions)


class ActionDispatcher:
    """Renders action affordances and forwards clicks to callbacks.

    Parameters
    ----------
    slots : ActionSlots
        Supplied callbacks.
    show_actions : bool
        Page-level switch for the actions column.
    mode : ActionMode
        Presentation mode selecting which action categories apply.
    grid_id : str
        Grid identifier used in events and log messages.
    """

    def __init__(
        self,
        slots: ActionSlots,
        *,
        show_actions: bool = False,
        mode: ActionMode = ActionMode.DEFAULT,
        grid_id: str = "",
    ) -> None:
        self.slots = slots
        self.grid_id = grid_id
        self.capabilities = ActionCapabilities.compute(slots, show_actions=show_actions, mode=mode)
        debug(
            f"Grid '{grid_id}' actions ({mode.value} mode): "
            f"{[a.value for a in self.capabilities.actions]}"
        )

    def buttons(self) -> list[ActionButton]:
        """Affordances rendered on every row."""
        return [
            ActionButton(
                action=action.value,
                label=action.label,
                event=f"row:{action.value}",
                destructive=action.destructive,
            )
            for action in self.capabilities.actions
        ]

    def dispatch(self, action: RowAction | str, row: Row, index: int = 0) -> bool:
        """Invoke the callback for ``action`` with the full row.

        Parameters
        ----------
        action : RowAction or str
            The action clicked.
        row : Row
            The row the action applies to, passed through unchanged.
        index : int
            Global row index, passed to callbacks that accept it.

        Returns
        -------
        bool
            True if a callback ran without raising.
        """
        try:
            resolved = RowAction(action)
        except ValueError:
            warn(f"Unknown row action '{action}' on grid '{self.grid_id}'")
            return False

        if not self.capabilities.allows(resolved):
            warn(f"Row action '{resolved.value}' is not enabled on grid '{self.grid_id}'")
            return False

        callback = self.slots.callback(resolved)
        if callback is None:
            return False

        try:
            call_flexible(callback, row, index)
        except Exception as e:
            log_callback_error(resolved.value, self.grid_id, e)
            return False
        return True
