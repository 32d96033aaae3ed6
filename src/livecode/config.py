"""Runtime configuration for the livecode supervisor.

Every option can be changed by the host at any time; the supervisor reads
the current value at each decision point instead of caching it.
"""

from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field


class LivecodeConfig(BaseModel):
    """Options controlling reload, reset and fault display behavior."""

    model_config = ConfigDict(validate_assignment=True)

    # Call the load hook instead of livereload after a successful reload
    reset_on_reload: bool = False

    # Print "updated file <name>" for every reloaded code unit
    log_reloads: bool = True

    # Manual full reset (load hook) from a keypress
    reload_on_keypress: bool = True
    reload_key: str = Field(default="f5", min_length=1)

    # Render the fault report over a cleared frame instead of a blank one
    show_error_on_screen: bool = True

    # Master switch for tracked assets and their pending fires
    track_assets: bool = True

    # Flush the diagnostic stream after every line
    autoflush_output: bool = True

    # Post-process a fault report before it is printed and displayed
    error_callback: Callable[[str], str] | None = None
