"""Configuration file parser."""

import logging
from abc import ABC, abstractmethod
from io import StringIO
from pathlib import Path
from typing import Any, Dict, List, Mapping, TextIO, Tuple, Type, TypeVar

import yaml

from prereq.relations import PreconditionError, Requirements

T = TypeVar("T", bound="Config")


class Config(ABC):

    """Abstract base class for YAML configuration.

    Subclasses should override abstract properties "required" and "optional".

    Example usage:

        # Assuming MyConfig is a subclass of Config:
        cfg = MyConfig.load(Path("/path/to/config.yml"))
        cfg.validate()

    Note that the creator must call validate(). They can optionally pass extra
    defaults as keyword arguments.
    """

    def __init__(self, path: Path, data: Mapping[str, Any]):
        self.path = path
        self.data = data

    def __repr__(self) -> str:
        name = self.__class__.__name__
        return f"{name}(path={self.path!r}, data={self.data!r})"

    @property
    @abstractmethod
    def required(self) -> Dict[str, Any]:
        """Required configuration keys and their defaults."""

    @property
    @abstractmethod
    def optional(self) -> Dict[str, Any]:
        """Optional configuration keys and their defaults."""

    def validate(self, **defaults: Any):
        """Validate the loaded configuration.

        This must be called manually after creating an instance. Missing
        required keys are logged as errors and replaced by their defaults.
        Extra defaults passed as keyword arguments override the defaults from
        the "required" and "optional" properties.
        """
        for key in self.required:
            if key not in self.data:
                logging.error("%s: missing %r", self.path, key)
        self.data = {**self.required, **self.optional, **defaults, **self.data}

    @classmethod
    def load(cls: Type[T], path: Path) -> T:
        """Load configuration from a file.

        A file that cannot be read or decoded is logged as an error and loads
        as empty configuration.
        """
        try:
            with open(path, encoding="utf-8") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as ex:
            logging.error("cannot read %s: %s", path, ex)
            content = ""
        return cls.loads(path, content)

    @classmethod
    def loads(cls: Type[T], path: Path, content: str) -> T:
        """Load configuration from a string."""
        return cls.load_from(path, StringIO(content))

    @classmethod
    def load_from(cls: Type[T], path: Path, content: TextIO) -> T:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as ex:
            logging.error("cannot parse %s: %s", path, ex)
            data = {}
        if data is None:
            data = {}
        if not isinstance(data, dict):
            logging.error("invalid YAML in %s: %s", path, type(data))
            data = {}
        return cls(path, data)

    def __getitem__(self, key: str) -> Any:
        """Get a configuration value."""
        return self.data[key]


class RequirementsFile(Config):

    """A relations file: a YAML mapping from dependents to requirements.

    Example:

        reflexive: false
        requires:
          deploy: build
          build: [fetch, configure]
    """

    required = {
        "requires": {},
    }

    optional = {
        "reflexive": False,
    }

    def pairs(self) -> List[Tuple[str, str]]:
        """Return the (dependent, requirement) pairs listed in the file.

        Malformed entries are logged as errors and skipped.
        """
        table = self["requires"]
        if table is None:
            return []
        if not isinstance(table, dict):
            logging.error("%s: 'requires' must be a mapping", self.path)
            return []
        result = []
        for dependent, reqs in table.items():
            if reqs is None:
                logging.warning("%s: %s has no requirements", self.path, dependent)
                continue
            if not isinstance(reqs, list):
                reqs = [reqs]
            for requirement in reqs:
                if isinstance(requirement, (dict, list)):
                    logging.error(
                        "%s: invalid requirement of %s: %r",
                        self.path,
                        dependent,
                        requirement,
                    )
                    continue
                result.append((str(dependent), str(requirement)))
        return result

    def build(self) -> Requirements[str]:
        """Create the requirements described by the file.

        Pairs are added in file order. A pair that cannot be added is logged as
        an error and skipped.
        """
        reflexive = self["reflexive"]
        if not isinstance(reflexive, bool):
            logging.error("%s: 'reflexive' must be true or false", self.path)
            reflexive = False
        reqs: Requirements[str] = Requirements(reflexive)
        for dependent, requirement in self.pairs():
            try:
                reqs.add(dependent, requirement)
            except PreconditionError as ex:
                logging.error("%s: %s", self.path, ex)
        logging.debug("loaded %r from %s", reqs, self.path)
        return reqs


def load_requirements(path: Path) -> Requirements[str]:
    """Load and validate a relations file, and build its requirements."""
    cfg = RequirementsFile.load(path)
    cfg.validate()
    logging.debug("relations config: %r", cfg)
    return cfg.build()
