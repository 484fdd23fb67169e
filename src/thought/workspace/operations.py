"""Typed batch operations.

Batch payloads arrive as loosely-typed JSON. Each entry is validated once
into one of the operation models below (a closed union tagged by ``type``),
and everything downstream works on the typed model.
"""

from abc import abstractmethod
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

OPERATION_TYPES = (
    "create_file",
    "edit_file",
    "delete_file",
    "move_file",
    "copy_file",
    "create_directory",
    "delete_directory",
)


class _Operation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def user_paths(self) -> tuple[str, ...]:
        """Paths as supplied by the caller, in (source, target) order."""
        return (self.path,)

    @abstractmethod
    def describe(self) -> str:
        """One-line human-readable summary."""


class CreateFileOperation(_Operation):
    type: Literal["create_file"] = "create_file"
    path: str = Field(min_length=1)
    content: str
    overwrite: bool = False

    def describe(self) -> str:
        extra = ", overwrite if exists" if self.overwrite else ""
        return f'Create file "{self.path}" ({len(self.content.encode("utf-8"))} bytes{extra})'


class EditFileOperation(_Operation):
    type: Literal["edit_file"] = "edit_file"
    path: str = Field(min_length=1)
    # Entries stay untyped here: malformed changes are skipped at apply time
    changes: list[Any] = Field(min_length=1)
    create_backup: bool = False

    def describe(self) -> str:
        extra = ", with backup" if self.create_backup else ""
        return f'Edit file "{self.path}" ({len(self.changes)} changes{extra})'


class DeleteFileOperation(_Operation):
    type: Literal["delete_file"] = "delete_file"
    path: str = Field(min_length=1)
    create_backup: bool = False

    def describe(self) -> str:
        extra = " (with backup)" if self.create_backup else ""
        return f'Delete file "{self.path}"{extra}'


class MoveFileOperation(_Operation):
    type: Literal["move_file"] = "move_file"
    source: str = Field(alias="from", min_length=1)
    target: str = Field(alias="to", min_length=1)
    overwrite: bool = False
    create_backup: bool = False

    def user_paths(self) -> tuple[str, ...]:
        return (self.source, self.target)

    def describe(self) -> str:
        overwrite = " (overwrite if exists)" if self.overwrite else ""
        backup = " (with backup)" if self.create_backup else ""
        return f'Move file from "{self.source}" to "{self.target}"{overwrite}{backup}'


class CopyFileOperation(_Operation):
    type: Literal["copy_file"] = "copy_file"
    source: str = Field(alias="from", min_length=1)
    target: str = Field(alias="to", min_length=1)
    overwrite: bool = False

    def user_paths(self) -> tuple[str, ...]:
        return (self.source, self.target)

    def describe(self) -> str:
        overwrite = " (overwrite if exists)" if self.overwrite else ""
        return f'Copy file from "{self.source}" to "{self.target}"{overwrite}'


class CreateDirectoryOperation(_Operation):
    type: Literal["create_directory"] = "create_directory"
    path: str = Field(min_length=1)
    recursive: bool = True

    def describe(self) -> str:
        extra = " (with parents)" if self.recursive else ""
        return f'Create directory "{self.path}"{extra}'


class DeleteDirectoryOperation(_Operation):
    type: Literal["delete_directory"] = "delete_directory"
    path: str = Field(min_length=1)
    recursive: bool = False
    dry_run: bool = False

    def describe(self) -> str:
        recursive = " (recursive)" if self.recursive else ""
        dry_run = " (dry run)" if self.dry_run else ""
        return f'Delete directory "{self.path}"{recursive}{dry_run}'


Operation = Annotated[
    Union[
        CreateFileOperation,
        EditFileOperation,
        DeleteFileOperation,
        MoveFileOperation,
        CopyFileOperation,
        CreateDirectoryOperation,
        DeleteDirectoryOperation,
    ],
    Field(discriminator="type"),
]

_operation_adapter: TypeAdapter = TypeAdapter(Operation)


class OperationParseError(ValueError):
    """A batch entry could not be turned into a typed operation."""


def _describe_validation_error(op_type: str, error: ValidationError) -> str:
    first = error.errors()[0]
    loc = [part for part in first["loc"] if isinstance(part, str) and part != op_type]
    field = loc[0] if loc else "type"

    if field == "changes":
        return "Missing or invalid 'changes' property for edit_file operation"
    if first["type"] in ("missing", "string_too_short"):
        return f"Missing '{field}' property for {op_type} operation"
    return f"Invalid '{field}' property for {op_type} operation - {first['msg']}"


def parse_operation(raw: Any) -> Operation:
    """Validate one raw batch entry.

    Raises:
        OperationParseError: Entry is malformed; the message names the problem
            without the ``Operation <n>:`` prefix

    Example:
        >>> parse_operation({"type": "move_file", "from": "a.txt", "to": "b.txt"}).target
        'b.txt'
    """
    if not isinstance(raw, dict):
        raise OperationParseError(
            "Invalid operation format - must be an object with a 'type' property"
        )

    op_type = raw.get("type")
    if not op_type:
        raise OperationParseError("Missing 'type' property")
    if op_type not in OPERATION_TYPES:
        raise OperationParseError(f'Unknown operation type "{op_type}"')

    try:
        return _operation_adapter.validate_python(raw)
    except ValidationError as e:
        raise OperationParseError(_describe_validation_error(op_type, e)) from e
