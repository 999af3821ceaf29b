"""Built-in variables available to environment and template expansion."""

import os
import sys
from typing import TYPE_CHECKING, Dict, Optional, Tuple

if TYPE_CHECKING:
    from .action import Action


class PredefinedVars:
    """Variables derived from an action's identity and location.

    Environment names (``ACTION_ID``, ``ACTION_DIR`` ...) are used by the
    environment processor. Lowercase template keys are a legacy mechanism
    kept for templates written before environment expansion existed.
    """

    def __init__(self, action: Optional["Action"]) -> None:
        self._env: Dict[str, str] = {}
        if action is None:
            return

        wd = action.wd or os.getcwd()
        action_dir = os.path.dirname(action.fpath) if action.fpath else ""
        self._env = {
            "CBIN": os.path.abspath(sys.argv[0]) if sys.argv and sys.argv[0] else "",
            "ACTION_ID": action.id,
            "ACTION_WD": wd,
            "ACTION_DIR": action_dir,
            "DISCOVERY_DIR": action.discovery_dir or "",
        }
        # Not available on every platform
        if hasattr(os, "getuid"):
            self._env["UID"] = str(os.getuid())
            self._env["GID"] = str(os.getgid())

    def getenv(self, key: str) -> Tuple[str, bool]:
        """Look up a predefined environment variable.

        Returns:
            Tuple of value and whether the variable is defined
        """
        if key in self._env:
            return self._env[key], True
        return "", False

    def env(self) -> Dict[str, str]:
        return dict(self._env)

    def template_data(self) -> Dict[str, str]:
        """Legacy template variables."""
        if not self._env:
            return {}
        return {
            "action_id": self._env["ACTION_ID"],
            "current_uid": self._env.get("UID", ""),
            "current_gid": self._env.get("GID", ""),
            "current_working_dir": self._env["ACTION_WD"],
            "actions_base_dir": self._env["DISCOVERY_DIR"],
            "action_dir": self._env["ACTION_DIR"],
            "current_bin": self._env["CBIN"],
        }
