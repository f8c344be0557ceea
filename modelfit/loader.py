"""Build profiles from plain documents (JSON/YAML files, dicts)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import ProfileError, RegistryError, SystemDetectionError
from .models import CapabilityProfile, RequirementsProfile
from .schema import CapabilityDocument, RequirementsDocument

logger = logging.getLogger(__name__)


def _profile_error(e: ValidationError, source: str | None = None) -> ProfileError:
    """First validation error as a ProfileError; field is the dotted document path."""
    first = e.errors()[0]
    field = ".".join(str(p) for p in first["loc"]) or None
    where = f"{field}: " if field else ""
    prefix = f"{source}: " if source else ""
    extra = f" (+{e.error_count() - 1} more)" if e.error_count() > 1 else ""
    return ProfileError(f"{prefix}{where}{first['msg']}{extra}", source=source, field=field)


def requirements_from_dict(data: dict) -> RequirementsProfile:
    """Build a RequirementsProfile, validating minimum <= recommended pairs and ISA tags."""
    if not isinstance(data, dict):
        raise ProfileError("Model requirements must be a mapping")
    model_id = data.get("id")
    try:
        doc = RequirementsDocument.model_validate(data)
    except ValidationError as e:
        raise _profile_error(e, str(model_id) if model_id else None) from None
    return doc.to_profile()


def capability_from_dict(data: dict) -> CapabilityProfile:
    """Build a CapabilityProfile from a scanner document (camelCase or Vulkan field names)."""
    if not isinstance(data, dict):
        raise ProfileError("Capability profile must be a mapping")
    try:
        doc = CapabilityDocument.model_validate(data)
    except ValidationError as e:
        raise _profile_error(e) from None
    return doc.to_capability()


# --- files ----------------------------------------------------------------


def load_document(path: Path) -> Any:
    """Parse a JSON or YAML file."""
    text = Path(path).read_text()
    if Path(path).suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def load_capability(path: Path) -> CapabilityProfile:
    """Read a capability profile file. Any failure is a system detection failure."""
    path = Path(path)
    try:
        data = load_document(path)
    except FileNotFoundError:
        raise SystemDetectionError(f"Capability profile not found: {path}", source=str(path)) from None
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise SystemDetectionError(f"Could not read capability profile {path}: {e}", source=str(path)) from e
    if isinstance(data, dict):
        for key in ("host", "capability", "systemInfo"):
            if isinstance(data.get(key), dict):
                data = data[key]
                break
    try:
        profile = capability_from_dict(data)
    except ProfileError as e:
        raise SystemDetectionError(f"Malformed capability profile {path}: {e}", source=str(path)) from e
    logger.debug("Loaded capability profile from %s (%s %s)", path, profile.platform, profile.architecture)
    return profile


def load_requirements_file(path: Path) -> list[RequirementsProfile]:
    """Read a registry file: a list of profiles or a mapping with a 'models' list."""
    path = Path(path)
    try:
        data = load_document(path)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise RegistryError(f"Could not read model registry {path}: {e}", source=str(path)) from e
    if isinstance(data, dict) and "models" in data:
        data = data["models"]
    if data is None:
        return []
    if not isinstance(data, list):
        raise RegistryError(f"Model registry {path} must be a list of models", source=str(path))
    try:
        profiles = [requirements_from_dict(entry) for entry in data]
    except ProfileError as e:
        raise RegistryError(f"Invalid model in {path}: {e}", source=str(path)) from e
    seen: set[str] = set()
    for p in profiles:
        if p.id in seen:
            raise RegistryError(f"Duplicate model id '{p.id}' in {path}", source=str(path))
        seen.add(p.id)
    return profiles
