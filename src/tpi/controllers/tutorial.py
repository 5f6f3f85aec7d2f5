"""Tutorial sequencer.

Walks the operator through an ordered list of tutorial steps. Each step
spawns a dialog built from its template, runs its start callbacks, and waits
until :meth:`TutorialSequencer.advance` is called with the step's ID. The
step's end callbacks then run, its dialog is destroyed and the next step
starts. After the last step a completion dialog is shown and the sequencer
resets.

Steps can be seeded from configuration or created at runtime::

    step = TutorialStep("Open the menu", "Raise your palm to open the menu.",
                        template=StepTemplate())
    step.on_start.add(highlight_hand_menu)
    sequencer.add(step)

    # where the operator completes the step
    sequencer.advance(step.id)

Template text fields containing ``[Name]`` receive the step title and fields
containing ``[Textfield]`` receive the step text (case-insensitive).
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional
import logging
import uuid

from tpi.core import (
    Pose, ButtonWidget, CallbackList, TutorialState,
    StartingPosition, SearchAlgorithm, SearchDirection,
)
from tpi.interfaces import DialogMenu, PlacementHelper
from tpi.utils.config import TutorialConfig


logger = logging.getLogger(__name__)

NAME_MARKER = "[Name]"
TEXT_MARKER = "[Textfield]"

COMPLETION_TITLE = "TPI Tutorial"
COMPLETION_TEXT = (
    "Hooray! You have successfully completed the tutorial!\n"
    "Do you want to reset the Task Planning Interface in order to start fresh?"
)


# ============================================================================
# Step Visuals
# ============================================================================

@dataclass
class TextSlot:
    """A text field inside a spawned dialog."""
    text: str


@dataclass
class StepVisual:
    """A spawned tutorial dialog."""
    name: str
    slots: List[TextSlot] = field(default_factory=list)
    pose: Optional[Pose] = None
    destroyed: bool = False

    @property
    def texts(self) -> List[str]:
        return [slot.text for slot in self.slots]

    def populate(self, title: str, text: str) -> None:
        """Fill the first ``[Name]`` slot with ``title`` and the first
        ``[Textfield]`` slot with ``text``.

        Every slot is looked at once, so a slot that was just filled is
        never substituted again.
        """
        name_done = False
        text_done = False
        for slot in self.slots:
            content = slot.text.lower()
            if not name_done and NAME_MARKER.lower() in content:
                slot.text = title
                name_done = True
                continue
            if not text_done and TEXT_MARKER.lower() in content:
                slot.text = text
                text_done = True
                continue

    def destroy(self) -> None:
        self.destroyed = True


@dataclass
class StepTemplate:
    """Prefab of a tutorial dialog: the text fields it is made of."""
    name: str = "Tutorial Dialog"
    texts: List[str] = field(default_factory=lambda: [NAME_MARKER, TEXT_MARKER])

    def instantiate(self) -> StepVisual:
        return StepVisual(name=self.name, slots=[TextSlot(t) for t in self.texts])


# ============================================================================
# Steps
# ============================================================================

@dataclass(eq=False)
class TutorialStep:
    """One step of the tutorial.

    Attributes:
        title: Title shown in the ``[Name]`` field
        text: Body shown in the ``[Textfield]`` field
        template: Dialog template spawned while the step is active
        on_start: Callbacks run when the step starts
        on_end: Callbacks run when the step is completed
        id: Time-ordered unique ID, fixed at construction
    """
    title: str = ""
    text: str = ""
    template: Optional[StepTemplate] = None
    on_start: CallbackList = field(default_factory=CallbackList)
    on_end: CallbackList = field(default_factory=CallbackList)
    _id: str = field(default_factory=lambda: str(uuid.uuid1()), init=False)

    @property
    def id(self) -> str:
        return self._id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TutorialStep":
        """Build a step from configuration (callbacks are added in code)."""
        template = None
        if data.get("template") is not None:
            template_data = data["template"]
            template = StepTemplate(
                name=template_data.get("name", "Tutorial Dialog"),
                texts=list(template_data.get("texts", [NAME_MARKER, TEXT_MARKER])),
            )
        return cls(
            title=data.get("title", ""),
            text=data.get("text", ""),
            template=template,
        )


# ============================================================================
# Sequencer
# ============================================================================

class TutorialSequencer:
    """Linear state machine over an ordered list of tutorial steps.

    States: ``INACTIVE`` -> ``STEP_ACTIVE`` (cursor i) -> ... ->
    ``COMPLETED`` -> ``INACTIVE``.

    The step list may be changed while the tutorial runs; the cursor is
    moved so that it keeps pointing at the same step.
    """

    def __init__(
        self,
        dialogs: DialogMenu,
        placement: PlacementHelper,
        config: Optional[TutorialConfig] = None,
        steps: Optional[Iterable[TutorialStep]] = None,
        widgets: Optional[Mapping[str, ButtonWidget]] = None,
        on_reset_requested: Optional[Callable[[], None]] = None,
    ):
        """Initialize the sequencer.

        Args:
            dialogs: Dialog menu used for notices
            placement: Placement helper used to position step dialogs
            config: Feature flag, toggle button key, labels and icons
            steps: Initial steps; if None, steps are built from ``config.steps``
            widgets: Hand menu buttons keyed by name
            on_reset_requested: Run when the operator picks "Reset TPI"
                after finishing the tutorial
        """
        self.config = config or TutorialConfig()
        self.dialogs = dialogs
        self.placement = placement
        self.on_reset_requested = on_reset_requested
        self.on_completed = CallbackList()

        if steps is not None:
            self._steps: List[TutorialStep] = list(steps)
        else:
            self._steps = [TutorialStep.from_dict(d) for d in self.config.steps]

        self._widgets: Dict[str, ButtonWidget] = dict(widgets or {})
        if self.config.toggle_button_key not in self._widgets:
            logger.warning(
                f"Tutorial toggle button '{self.config.toggle_button_key}' "
                f"not in widget table, its label will not be updated"
            )

        self._state = TutorialState.INACTIVE
        self._cursor = 0
        self._visual: Optional[StepVisual] = None

    # =========================================================================
    # Status
    # =========================================================================

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self.config.enabled = value

    @property
    def state(self) -> TutorialState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == TutorialState.STEP_ACTIVE

    @property
    def current_index(self) -> int:
        return self._cursor

    @property
    def current_step(self) -> Optional[TutorialStep]:
        if not self.is_active:
            return None
        return self._steps[self._cursor]

    @property
    def current_visual(self) -> Optional[StepVisual]:
        return self._visual

    @property
    def steps(self) -> List[TutorialStep]:
        """Copy of the step list."""
        return list(self._steps)

    @property
    def total_steps(self) -> int:
        return len(self._steps)

    @property
    def remaining_steps(self) -> int:
        """Steps left after the current one, never negative."""
        return max(0, len(self._steps) - self._cursor - 1)

    def is_step_active(self, step_id: str) -> bool:
        """Whether the step with ``step_id`` is the one currently shown."""
        if not self.is_active:
            return False
        return self._steps[self._cursor].id == step_id

    # =========================================================================
    # Transitions
    # =========================================================================

    def start(self) -> bool:
        """Start the tutorial at the first step."""
        if not self.enabled:
            self._show_error("The Tutorial Feature has been disabled.")
            return False
        if self.is_active:
            logger.warning("Tutorial is already running")
            return False
        if not self._steps:
            self._show_error(
                "No Tutorial Dialogs were set up either in the configuration or "
                "during runtime! Therefore, the Tutorial cannot be started."
            )
            return False

        self._set_toggle_affordance(active=True)
        self._state = TutorialState.STEP_ACTIVE
        self._cursor = 0
        logger.info(f"Tutorial started ({len(self._steps)} steps)")
        self._enter_current_step()
        return True

    def advance(self, trigger_id: str) -> bool:
        """Complete the current step if ``trigger_id`` is its ID.

        Returns:
            True if the tutorial moved on, False if the feature is disabled,
            the tutorial is not running or the ID belongs to another step
        """
        if not self.enabled or not self.is_active:
            return False
        if not self.is_step_active(trigger_id):
            logger.debug(f"Ignoring trigger {trigger_id}, not the current step")
            return False

        step = self._steps[self._cursor]
        step.on_end.invoke()
        # An end callback may have reset the tutorial or moved it on
        if self.current_step is not step:
            return True
        self._destroy_visual()
        self._cursor += 1

        if self._cursor > len(self._steps) - 1:
            self._complete()
            return True

        self._enter_current_step()
        return True

    def reset(self) -> None:
        """Stop the tutorial and go back to the first step."""
        self._destroy_visual()
        self._state = TutorialState.INACTIVE
        self._cursor = 0
        self._set_toggle_affordance(active=False)

    def toggle(self) -> bool:
        """Start the tutorial if it is stopped, stop it if it is running."""
        if not self.enabled:
            self._show_error("The Tutorial Feature has been disabled.")
            return False
        if self.is_active:
            logger.info("Tutorial stopped by operator")
            self.reset()
            return True
        return self.start()

    def _enter_current_step(self) -> None:
        step = self._steps[self._cursor]
        logger.debug(f"Tutorial step {self._cursor + 1}/{len(self._steps)}: {step.title}")
        step.on_start.invoke()
        # A start callback may have completed the step already
        if self.current_step is not step:
            return
        self._spawn_visual(step)

    def _complete(self) -> None:
        self._state = TutorialState.COMPLETED
        logger.info("Tutorial completed")
        self.on_completed.invoke()
        self.dialogs.show_two_button_dialog(
            COMPLETION_TITLE, COMPLETION_TEXT,
            "Reset TPI", self.on_reset_requested,
            "Decline", None,
            self.config.abort_icon,
        )
        self.reset()

    # =========================================================================
    # Step List
    # =========================================================================

    def add(self, step: TutorialStep) -> None:
        """Append a step."""
        self._steps.append(step)

    def insert(self, step: TutorialStep, position: int) -> bool:
        """Insert a step before ``position`` (``len`` appends)."""
        if position < 0 or position > len(self._steps):
            logger.warning(f"Cannot insert tutorial step, position {position} is out of bounds")
            return False
        self._steps.insert(position, step)
        if self.is_active and position <= self._cursor:
            self._cursor += 1
        return True

    def remove_at(self, position: int) -> bool:
        """Remove the step at ``position``.

        Removing the step that is currently shown closes its dialog without
        running its end callbacks and moves on to the step that takes its
        place, or stops the tutorial if there is none.
        """
        if position < 0 or position >= len(self._steps):
            logger.warning(f"Cannot remove tutorial step, position {position} is out of bounds")
            return False
        self._steps.pop(position)
        if not self.is_active:
            return True

        if position < self._cursor:
            self._cursor -= 1
        elif position == self._cursor:
            self._destroy_visual()
            if self._cursor < len(self._steps):
                self._enter_current_step()
            else:
                logger.info("Active tutorial step removed and none left, stopping tutorial")
                self.reset()
        return True

    def remove(self, step: TutorialStep) -> bool:
        """Remove a specific step."""
        for i, s in enumerate(self._steps):
            if s is step:
                return self.remove_at(i)
        logger.warning(f"Tutorial step {step.id} is not in the list")
        return False

    def clear(self) -> None:
        """Remove all steps, stopping the tutorial if it runs."""
        if self.is_active:
            self.reset()
        self._steps.clear()

    def get(self, step_id: str) -> Optional[TutorialStep]:
        """Find a step by ID."""
        for step in self._steps:
            if step.id == step_id:
                return step
        logger.warning(f"Tutorial step with ID {step_id} was not found")
        return None

    # =========================================================================
    # Visuals / UI
    # =========================================================================

    def _spawn_visual(self, step: TutorialStep) -> None:
        if step.template is None:
            logger.warning(f"Tutorial step '{step.title}' has no template, nothing is shown")
            return
        visual = step.template.instantiate()
        visual.name = f"TPI Tutorial Step: {step.title} with ID: {step.id}"
        visual.pose = self.placement.find_and_reserve_position(
            visual,
            StartingPosition.MIDDLE_CENTER,
            SearchAlgorithm.CLOSEST_POSITION,
            SearchDirection.BOTH_WAYS,
        )
        visual.populate(step.title, step.text)
        self._visual = visual

    def _destroy_visual(self) -> None:
        if self._visual is None:
            return
        self.placement.free_up_spot(self._visual)
        self._visual.destroy()
        self._visual = None

    def _set_toggle_affordance(self, active: bool) -> None:
        button = self._widgets.get(self.config.toggle_button_key)
        if button is None:
            return
        if active:
            button.configure(self.config.stop_label, self.config.stop_icon)
        else:
            button.configure(self.config.start_label, self.config.start_icon)

    def _show_error(self, text: str) -> None:
        self.dialogs.show_error("Error", text, "Confirm", self.config.abort_icon)
