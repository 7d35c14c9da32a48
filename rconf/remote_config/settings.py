from __future__ import annotations

import os
from typing import Mapping

from dotenv import dotenv_values

from rconf.coordination.lease import DEFAULT_LEASE_DURATION, LeaseKey
from rconf.core import DataModel
from rconf.core.exceptions import BadRequestError

from ._constants import DEFAULT_DOCUMENT_NAME

ENV_PREFIX = "RCONF_"

_TRUE_VALUES = ("1", "true", "yes", "on")


class RemoteConfigSettings(DataModel):
    """Settings of one deployment's remote config."""

    namespace: str
    """Namespace holding the document and the lease.
    """

    deployment: str | None = None
    """Deployment name, recorded on new clusters.
    """

    lease_name: str | None = None
    """Lease name, defaults to the namespace.
    """

    lease_duration: float = DEFAULT_LEASE_DURATION
    """Seconds a lease stays live without renewal.
    """

    document_name: str = DEFAULT_DOCUMENT_NAME
    """Name of the stored document.
    """

    max_command_history: int | None = None
    """Entries kept in the command history, unbounded when None.
    """

    force: bool = False
    """Overwrite stored common flags that differ.
    """

    @property
    def document_key(self) -> str:
        return f"{self.namespace}/{self.document_name}"

    @property
    def lease_key(self) -> LeaseKey:
        return LeaseKey(
            namespace=self.namespace,
            name=self.lease_name or self.namespace,
        )

    @staticmethod
    def from_env(
        env_file: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> RemoteConfigSettings:
        """Read settings from ``RCONF_*`` variables.

        Variables in the environment take precedence over
        the ones in ``env_file``.

        Args:
            env_file: Optional ENV file path.
            environ: Environment, defaults to ``os.environ``.

        Returns:
            Settings.
        """
        values: dict[str, str | None] = dict()
        if env_file is not None:
            values.update(dotenv_values(env_file))
        values.update(os.environ if environ is None else environ)

        def get(name: str) -> str | None:
            value = values.get(f"{ENV_PREFIX}{name}")
            return value if value else None

        namespace = get("NAMESPACE")
        if namespace is None:
            raise BadRequestError(f"{ENV_PREFIX}NAMESPACE is not set")
        args: dict = dict(namespace=namespace)
        for name, field in (
            ("DEPLOYMENT", "deployment"),
            ("LEASE_NAME", "lease_name"),
            ("LEASE_DURATION", "lease_duration"),
            ("DOCUMENT_NAME", "document_name"),
            ("MAX_COMMAND_HISTORY", "max_command_history"),
        ):
            value = get(name)
            if value is not None:
                args[field] = value
        force = get("FORCE")
        if force is not None:
            args["force"] = force.lower() in _TRUE_VALUES
        return RemoteConfigSettings(**args)
