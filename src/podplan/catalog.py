# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Load package catalogs exported by the manifest analyser."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import CatalogError
from .models import BuildConfiguration, Package, PackageCatalog


class PackageRecord(BaseModel):
    """Schema of a single package entry in a catalog document."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = Field(min_length=1)
    dependency_names: list[str] = Field(default_factory=list, alias="dependencies")
    build_configuration: BuildConfiguration = "release"
    is_static: bool = True
    is_prebuilt: bool = False
    is_development_pod: bool = False
    is_subspec: bool | None = None

    def to_package(self) -> Package:
        """Return the immutable :class:`Package` described by this record."""

        return Package(
            name=self.name,
            dependency_names=tuple(self.dependency_names),
            build_configuration=self.build_configuration,
            is_static=self.is_static,
            is_prebuilt=self.is_prebuilt,
            is_development_pod=self.is_development_pod,
            is_subspec=self.is_subspec,
        )


class CatalogDocument(BaseModel):
    """Top-level catalog document."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    packages: list[PackageRecord] = Field(default_factory=list)


def catalog_from_mapping(payload: Mapping[str, Any]) -> PackageCatalog:
    """Build a :class:`PackageCatalog` from decoded catalog data.

    Args:
        payload: Mapping with a ``packages`` array.

    Returns:
        PackageCatalog: Catalog preserving document order.

    Raises:
        CatalogError: If the payload does not match the catalog schema.
    """

    try:
        document = CatalogDocument.model_validate(payload)
    except PydanticValidationError as exc:
        raise CatalogError(f"Catalog failed schema validation: {exc}") from exc
    return PackageCatalog(record.to_package() for record in document.packages)


def load_catalog(path: Path) -> PackageCatalog:
    """Read the JSON catalog stored at ``path``.

    Raises:
        CatalogError: If the file is missing, not JSON, or fails validation.
    """

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"Unable to read catalog {path}: {exc}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise CatalogError(f"Catalog {path} must contain a JSON object")
    return catalog_from_mapping(payload)


__all__ = ["CatalogDocument", "PackageRecord", "catalog_from_mapping", "load_catalog"]
