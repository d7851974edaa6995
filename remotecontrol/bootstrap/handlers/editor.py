from remotecontrol.bootstrap.deps import get_registry, get_workbench
from remotecontrol.core.models.command import Outcome
from remotecontrol.host.errors import HostError, NoActiveEditorError


registry = get_registry()


@registry.command("showInfoMessage")
def show_info_message(argument: str) -> None:
    """Show an information notification."""
    get_workbench().info(argument)


@registry.command("showWarningMessage")
def show_warning_message(argument: str) -> None:
    """Show a warning notification."""
    get_workbench().warning(argument)


@registry.command("showErrorMessage")
def show_error_message(argument: str) -> None:
    """Show an error notification."""
    get_workbench().error(argument)


@registry.command("openFile", failure_prefix="Failed to open file")
async def open_file(argument: str) -> None:
    """Open the file at the given path and make it active."""
    await get_workbench().open_file(argument)


@registry.command("open_editor", failure_prefix="Failed to open editor")
async def open_editor(argument: str) -> None:
    """Open an untitled document holding the given content."""
    await get_workbench().open_content(argument)


@registry.command("runCommand")
async def run_command(argument: str) -> None:
    """Run a workbench action by identifier."""
    try:
        await get_workbench().execute_action(argument)
    except HostError as exc:
        raise HostError(f'Failed to execute command "{argument}": {exc}') from exc


@registry.command("insertText", failure_prefix="Failed to insert text")
async def insert_text(argument: str) -> Outcome | None:
    """Insert text at the cursor of the active document."""
    try:
        await get_workbench().insert_text(argument)
    except NoActiveEditorError as exc:
        return Outcome.rejected("insertText", str(exc))
    return None


@registry.command("replaceSelection", failure_prefix="Failed to replace selection")
async def replace_selection(argument: str) -> Outcome | None:
    """Replace the selection of the active document."""
    try:
        await get_workbench().replace_selection(argument)
    except NoActiveEditorError as exc:
        return Outcome.rejected("replaceSelection", str(exc))
    return None


@registry.command("saveAll", failure_prefix="Failed to save all")
async def save_all(_: str) -> None:
    """Save every modified document."""
    await get_workbench().save_all()


@registry.command("closeActiveEditor", failure_prefix="Failed to close active editor")
async def close_active_editor(_: str) -> None:
    """Close the active document."""
    await get_workbench().close_active_editor()


@registry.command("toggleTerminal", failure_prefix="Failed to toggle terminal")
async def toggle_terminal(_: str) -> None:
    """Show or hide the terminal panel."""
    await get_workbench().toggle_terminal()


@registry.command("newFile", failure_prefix="Failed to create new file")
async def new_file(_: str) -> None:
    """Create an empty untitled document."""
    await get_workbench().new_file()
