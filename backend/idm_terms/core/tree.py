"""
Contract with the authentication tree engine

The engine owns session state and drives the callback round trips. These
types carry exactly what a node needs from it and what it hands back.
"""
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from idm_terms.core.callbacks import Callback

USERNAME = "username"

CallbackT = TypeVar("CallbackT", bound=Callback)


class NodeProcessError(Exception):
    """Raised by a node when the tree engine must abort the login"""
    pass


class TreeContext:
    """
    State handed to a node on each round trip

    Contains:
    - shared_state: state kept for the whole login flow
    - transient_state: state the engine clears more aggressively
    - callbacks: callbacks returned by the client, empty on the first visit
    """

    def __init__(
        self,
        shared_state: Optional[Dict[str, Any]] = None,
        transient_state: Optional[Dict[str, Any]] = None,
        callbacks: Sequence[Callback] = ()
    ):
        self.shared_state = shared_state if shared_state is not None else {}
        self.transient_state = transient_state if transient_state is not None else {}
        self.callbacks = list(callbacks)

    def get_callback(self, callback_type: Type[CallbackT]) -> Optional[CallbackT]:
        """Get the first returned callback of the given type"""
        for callback in self.callbacks:
            if isinstance(callback, callback_type):
                return callback
        return None

    @property
    def has_callbacks(self) -> bool:
        return bool(self.callbacks)


class Action:
    """
    Result of a node evaluation

    Either a transition to a named outcome, carrying the state maps onwards,
    or a list of callbacks to show the user before the node is called again.
    """

    def __init__(
        self,
        outcome: Optional[str] = None,
        callbacks: Sequence[Callback] = (),
        shared_state: Optional[Dict[str, Any]] = None,
        transient_state: Optional[Dict[str, Any]] = None
    ):
        if (outcome is None) == (not callbacks):
            raise ValueError("An action either goes to an outcome or sends callbacks")
        self.outcome = outcome
        self.callbacks: List[Callback] = list(callbacks)
        self.shared_state = shared_state
        self.transient_state = transient_state

    @classmethod
    def goto(
        cls,
        outcome: str,
        shared_state: Optional[Dict[str, Any]] = None,
        transient_state: Optional[Dict[str, Any]] = None
    ) -> "Action":
        """Transition to the node wired to ``outcome``"""
        return cls(outcome=outcome, shared_state=shared_state, transient_state=transient_state)

    @classmethod
    def send(cls, callbacks: Sequence[Callback]) -> "Action":
        """Send callbacks to the client and wait for its response"""
        return cls(callbacks=callbacks)

    @property
    def sends_callbacks(self) -> bool:
        return bool(self.callbacks)

    def to_dict(self) -> Dict[str, Any]:
        """Convert action to dictionary"""
        return {
            "outcome": self.outcome,
            "callbacks": [callback.to_dict() for callback in self.callbacks],
        }

    def __repr__(self) -> str:
        if self.outcome is not None:
            return f"Action(outcome={self.outcome!r})"
        return f"Action(callbacks={[type(c).__name__ for c in self.callbacks]})"


class Outcome:
    """Outcome descriptor shown in the tree designer"""

    def __init__(self, id: str, display_name: str):
        self.id = id
        self.display_name = display_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Outcome):
            return NotImplemented
        return self.id == other.id and self.display_name == other.display_name

    def __repr__(self) -> str:
        return f"Outcome(id={self.id!r}, display_name={self.display_name!r})"

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "displayName": self.display_name}
