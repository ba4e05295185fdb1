"""
Docker daemon adapter.

This module wraps the docker-py client and exposes the four operations the
synchronization layer needs:
  - Listing containers (running and stopped), tagged images and volumes
  - Starting and stopping a container by id

Raw daemon records are normalized into the dataclasses from model.py so the
rest of the application never touches docker-py objects.

Key Classes:
  - DaemonClient: blocking wrapper around one docker.DockerClient

Error Handling:
  - Connection failures -> DaemonConnectionError (from DaemonClient.connect)
  - Failed list calls -> FetchError
  - Failed start/stop calls -> MutationError
  Every failure is logged with its traceback before being re-raised as one of
  the errors above; callers convert them into a user-facing message.

Dependencies:
  - docker>=7.0.0 (docker-py client)
"""

import docker
import os
import sys
import logging
import functools
from typing import Any, Callable, Dict, List, Optional, Tuple, Type
from .model import ContainerRecord, ImageRecord, VolumeRecord, RuntimeState

logger = logging.getLogger(__name__)

UNIX_DEFAULT_HOST = "unix:///var/run/docker.sock"
WINDOWS_DEFAULT_HOST = "npipe:////./pipe/docker_engine"
NONE_LABEL = "<none>"


class DaemonError(Exception):
    """Base class for failures talking to the Docker daemon."""

    def __init__(self, operation: str, cause: Any):
        super().__init__(str(cause))
        self.operation = operation
        self.cause = cause


class DaemonConnectionError(DaemonError):
    pass


class FetchError(DaemonError):
    pass


class MutationError(DaemonError):
    pass


def daemon_call(error_cls: Type[DaemonError], operation: str) -> Callable:
    """
    Decorator for Docker API methods that converts failures into domain errors.

    Catches exceptions, logs them, and re-raises them as ``error_cls`` so the
    caller can report them without knowing about docker-py exceptions.

    Usage:
        @daemon_call(FetchError, "list containers")
        def list_containers(self) -> List[ContainerRecord]:
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except DaemonError:
                raise
            except Exception as e:
                logger.error(f"Docker operation failed in {func.__name__}: {e}", exc_info=True)
                raise error_cls(operation, e) from e
        return wrapper
    return decorator


def default_daemon_host() -> str:
    if sys.platform == "win32":
        return WINDOWS_DEFAULT_HOST
    return UNIX_DEFAULT_HOST


def resolve_daemon_host(configured: Optional[str] = None) -> str:
    """
    Resolve the daemon endpoint.

    DOCKER_HOST wins, then the configured value, then the platform default.
    The value is passed through as-is.
    """
    env_host = os.environ.get("DOCKER_HOST", "").strip()
    if env_host:
        return env_host
    if configured:
        return configured
    return default_daemon_host()


def format_size(size: int) -> str:
    """Format a byte count with binary units and one decimal (B, KB, MB, GB)."""
    kb = 1024
    mb = kb * 1024
    gb = mb * 1024
    if size >= gb:
        return f"{size / gb:.1f}GB"
    if size >= mb:
        return f"{size / mb:.1f}MB"
    if size >= kb:
        return f"{size / kb:.1f}KB"
    return f"{size}B"


def format_ports(ports: Optional[List[Dict[str, Any]]]) -> str:
    if not ports:
        return "--"
    parts = []
    for p in ports:
        public = p.get("PublicPort")
        private = p.get("PrivatePort")
        if public is not None:
            parts.append(f"{public}:{private}")
        else:
            parts.append(f"{private}")
    return ", ".join(parts)


def split_repo_tag(repo_tags: Optional[List[str]]) -> Tuple[str, str]:
    if not repo_tags:
        return NONE_LABEL, NONE_LABEL
    parts = repo_tags[0].split(":")
    repository = parts[0] if parts[0] else NONE_LABEL
    tag = parts[1] if len(parts) > 1 and parts[1] else NONE_LABEL
    return repository, tag


def container_from_attrs(attrs: Dict[str, Any]) -> ContainerRecord:
    raw_id = attrs.get("Id")
    names = attrs.get("Names") or []
    return ContainerRecord(
        id=raw_id[:12] if raw_id else "unknown",
        name=names[0].lstrip("/") if names else "unnamed",
        image=attrs.get("Image") or "unknown",
        status_text=attrs.get("Status") or "unknown",
        port_mappings=format_ports(attrs.get("Ports")),
        runtime_state=RuntimeState.from_daemon(attrs.get("State")),
    )


def image_from_attrs(attrs: Dict[str, Any]) -> ImageRecord:
    repository, tag = split_repo_tag(attrs.get("RepoTags"))
    size = attrs.get("Size") or 0
    return ImageRecord(
        id=attrs.get("Id", ""),
        repository=repository,
        tag=tag,
        size_label=format_size(size),
        size_bytes=size,
    )


def volume_from_attrs(attrs: Dict[str, Any]) -> VolumeRecord:
    return VolumeRecord(
        name=attrs.get("Name", ""),
        driver=attrs.get("Driver", ""),
        mountpoint=attrs.get("Mountpoint", ""),
    )


class DaemonClient:
    def __init__(self, client: docker.DockerClient, host: str = ""):
        self.client = client
        self.host = host

    @classmethod
    def connect(cls, host: Optional[str] = None) -> "DaemonClient":
        """
        Connect to the daemon and verify it answers.

        Raises:
            DaemonConnectionError: the daemon is unreachable or refused the ping
        """
        host = host or resolve_daemon_host()
        try:
            if host == os.environ.get("DOCKER_HOST", "").strip():
                # from_env also honours the TLS variables that go with DOCKER_HOST
                client = docker.from_env()
            else:
                client = docker.DockerClient(base_url=host)
            client.ping()
        except Exception as e:
            logger.error(f"Failed to connect to Docker at {host}: {e}")
            raise DaemonConnectionError("connect", e) from e
        logger.info(f"Connected to Docker at {host}")
        return cls(client, host)

    @daemon_call(FetchError, "list containers")
    def list_containers(self) -> List[ContainerRecord]:
        raw = self.client.containers.list(all=True, sparse=True)
        return [container_from_attrs(c.attrs) for c in raw]

    @daemon_call(FetchError, "list images")
    def list_images(self) -> List[ImageRecord]:
        # Tagged images only; dangling ones are filtered by the daemon.
        # List endpoint only; images are never inspected one by one
        raw = self.client.api.images(all=False, filters={"dangling": False})
        return [image_from_attrs(attrs) for attrs in raw]

    @daemon_call(FetchError, "list volumes")
    def list_volumes(self) -> List[VolumeRecord]:
        raw = self.client.volumes.list()
        return [volume_from_attrs(v.attrs) for v in raw]

    # Actions
    @daemon_call(MutationError, "start container")
    def start_container(self, container_id: str) -> None:
        self.client.containers.get(container_id).start()

    @daemon_call(MutationError, "stop container")
    def stop_container(self, container_id: str) -> None:
        self.client.containers.get(container_id).stop()

    def close(self) -> None:
        try:
            self.client.close()
        except Exception as e:
            logger.warning(f"Error closing Docker client: {e}")
