# errors.py
"""
# LessonTree
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

Custom exception classes with improved error messages for LessonTree

All exceptions include:
- Clear error description
- Actionable suggestions
- Relevant context

Only fatal problems are raised. A missing icon, caption or card file is
never an error; the builders resolve it to None and keep walking.
"""
from pathlib import Path
from typing import Optional, Dict, Any


class LessonTreeError(Exception):
    """Base exception for all LessonTree errors"""

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        self.cause = cause
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error with all details"""
        lines = [
            "",
            "=" * 70,
            f"❌ {self.__class__.__name__}",
            "=" * 70,
            "",
            self.message,
        ]

        if self.context:
            lines.append("")
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        if self.suggestion:
            lines.append("")
            lines.append("💡 Suggestion:")
            lines.append(f"  {self.suggestion}")

        if self.cause:
            lines.append("")
            lines.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

        lines.append("")
        lines.append("=" * 70)
        lines.append("")

        return "\n".join(lines)


class ConfigurationError(LessonTreeError):
    """Configuration is missing or invalid"""
    pass


class ContentRootError(LessonTreeError):
    """Content root cannot be read"""
    pass


class OutputWriteError(LessonTreeError):
    """Generated artifact could not be written"""
    pass


# Specific error factory functions

def content_root_missing_error(content_root: Path) -> ContentRootError:
    """Create error for a content root that is missing or not a directory"""
    return ContentRootError(
        message=f"Content root not found: {content_root}",
        suggestion=(
            "Run from the repository root, or point at the content folder:\n"
            "  lessontree manifest --root path/to/usii\n\n"
            "Or set it in lessontree.yaml:\n"
            "  content_dir: usii"
        ),
        context={
            "content_root": str(content_root),
            "exists": content_root.exists(),
        }
    )


def output_write_error(output_path: Path, cause: Optional[Exception] = None) -> OutputWriteError:
    """Create error when a generated file cannot be written"""
    return OutputWriteError(
        message=f"Could not write {output_path.name}",
        suggestion=(
            "Check that the destination folder is writable and that\n"
            "  no other process holds the file open."
        ),
        context={
            "output_path": str(output_path),
        },
        cause=cause
    )


def invalid_config_error(config_path: Path, cause: Optional[Exception] = None) -> ConfigurationError:
    """Create error for a config file that cannot be parsed"""
    return ConfigurationError(
        message=f"Invalid configuration in {config_path.name}",
        suggestion=(
            "Fix the YAML syntax, or regenerate a template with:\n"
            "  lessontree init-config --force"
        ),
        context={
            "file": str(config_path),
        },
        cause=cause
    )
