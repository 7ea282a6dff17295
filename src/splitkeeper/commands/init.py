"""Init command implementation."""

from ..config import write_config_template
from ..constants import CONFIG_FILE
from ..output import get_output_context
from .common import get_config_dir


def init() -> None:
    """Create a splitkeeper config in the current directory."""
    ctx = get_output_context()
    config_dir = get_config_dir()
    config_path = config_dir / CONFIG_FILE

    if config_path.exists():
        ctx.print(f"[yellow]Config already exists:[/yellow] {config_path}")
        ctx.print_json({"config": str(config_path), "created": False})
        return

    write_config_template(config_dir)
    ctx.success(f"Created config template: {config_path}", {"config": str(config_path)})
