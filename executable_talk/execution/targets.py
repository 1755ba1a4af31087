from typing import Any, Dict, Optional


def extract_target(action_type: str, params: Dict[str, Any]) -> Optional[str]:
    """
    Picks the parameter that best identifies what an action acted on, for
    failure reports (file path, command text, debug config, command id).
    Sequences report per-step targets through their breakdown instead.
    """
    params = params or {}

    if action_type in ("file.open", "editor.highlight", "validate.fileExists"):
        key = "path"
    elif action_type in ("terminal.run", "validate.command"):
        key = "command"
    elif action_type == "debug.start":
        key = "configName"
    elif action_type == "vscode.command":
        key = "id"
    elif action_type == "validate.port":
        port = params.get("port")
        if port is None:
            return None
        return f"{params.get('host') or 'localhost'}:{port}"
    else:
        return None

    value = params.get(key)
    if key == "configName" and value is None:
        value = params.get("config_name")
    return value if isinstance(value, str) else None
