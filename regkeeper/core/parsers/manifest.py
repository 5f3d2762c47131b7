# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
RegKeeper Manifest Parser

Resources are grouped by type and keyed by title; the title is the path
unless a 'path' parameter overrides it:

    resources:
      registry_key:
        'HKLM\\Software\\Vendor':
          purge_values: true
      registry_value:
        'HKLM\\Software\\Vendor\\Setting':
          type: string
          data: hello
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from ..exceptions import FlagFormatError, ManifestError, PathSyntaxError, RegKeeperError
from ..resources import KEY_TYPE, RESOURCE_TYPES, VALUE_TYPE, Resource

BOOL_TAG = "tag:yaml.org,2002:bool"


class ManifestLoader(yaml.SafeLoader):
    """
    SafeLoader that only resolves true/false (any case) to booleans.

    YAML 1.1 also reads yes/no/on/off as booleans; here they stay strings so
    that flag validation sees the literal the user wrote.
    """


ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ManifestLoader.add_implicit_resolver(
    BOOL_TAG, re.compile(r"^(?:true|false)$", re.IGNORECASE), list("tTfF")
)


def load_yaml_stream(stream):
    return yaml.load(stream, Loader=ManifestLoader)


# Manifest parameter name -> dataclass field name
PARAMETERS = {
    KEY_TYPE: {
        "path": "path",
        "ensure": "ensure",
        "purge_values": "purge_values",
        "require": "require",
    },
    VALUE_TYPE: {
        "path": "path",
        "ensure": "ensure",
        "type": "value_type",
        "data": "data",
        "require": "require",
    },
}


class ManifestParser:
    """Parser for RegKeeper declaration manifests"""

    @staticmethod
    def load_yaml(file_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load a manifest file.

        Raises:
            ManifestError: If the file cannot be read or is not a mapping
        """
        path = Path(file_path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = load_yaml_stream(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ManifestError(
                f"Failed to load manifest: {e}", file_path=str(path), cause=e
            )

        if not isinstance(data, dict):
            raise ManifestError(
                "Manifest must be a mapping with a 'resources' section",
                file_path=str(path),
            )
        return data

    @staticmethod
    def parse_resource(
        resource_type: str, title: Any, params: Any
    ) -> Resource:
        """
        Build one resource declaration.

        Raises:
            PathSyntaxError, FlagFormatError: Re-raised so the offending
                literal reaches the user untouched
            ManifestError: For unknown parameters and other declaration errors
        """
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ManifestError(
                f"Parameters of {resource_type}[{title}] must be a mapping"
            )

        mapping = PARAMETERS[resource_type]
        unknown = sorted(set(params) - set(mapping))
        if unknown:
            raise ManifestError(
                f"Invalid parameter(s) {unknown} for {resource_type}[{title}]",
                details={"allowed": sorted(mapping)},
            )

        kwargs = {mapping[name]: value for name, value in params.items()}
        kwargs.setdefault("path", title)

        try:
            return RESOURCE_TYPES[resource_type](**kwargs)
        except (PathSyntaxError, FlagFormatError):
            raise
        except RegKeeperError as e:
            raise ManifestError(
                f"Invalid declaration {resource_type}[{title}]: {e.message}", cause=e
            )

    @staticmethod
    def parse(data: Dict[str, Any]) -> List[Resource]:
        """
        Convert manifest data into resource declarations.

        Args:
            data: Loaded manifest

        Returns:
            Resources in declaration order
        """
        sections = data.get("resources") or {}
        if not isinstance(sections, dict):
            raise ManifestError("'resources' must be a mapping of resource types")

        resources: List[Resource] = []
        for resource_type, declarations in sections.items():
            if resource_type not in RESOURCE_TYPES:
                raise ManifestError(
                    f"Unknown resource type {resource_type!r}",
                    details={"allowed": sorted(RESOURCE_TYPES)},
                )
            if declarations is None:
                continue
            if not isinstance(declarations, dict):
                raise ManifestError(
                    f"'{resource_type}' must be a mapping of titles to parameters"
                )

            for title, params in declarations.items():
                resources.append(
                    ManifestParser.parse_resource(resource_type, title, params)
                )

        return resources

    @staticmethod
    def parse_file(file_path: Union[str, Path]) -> List[Resource]:
        data = ManifestParser.load_yaml(file_path)
        try:
            return ManifestParser.parse(data)
        except ManifestError as e:
            if e.file_path is None:
                e.file_path = str(file_path)
            raise
