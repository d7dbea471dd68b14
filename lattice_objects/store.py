"""Object store façade: one authenticated call per command."""

import logging
from typing import Callable, Dict, Iterator, List, Mapping, Optional

from typing_extensions import Protocol

from lattice_objects.duration import ttl_headers
from lattice_objects.exceptions import LocalIOError, ObjectStoreError, RemoteError, with_context
from lattice_objects.models import ConnectionParameters, ListResponse, PathMetadata
from lattice_objects.pagination import PageIterator
from lattice_objects.rest_client import ObjectStream, RestClient, build_headers

logger = logging.getLogger(__name__)


class ObjectTransport(Protocol):
    """What the façade needs from an object store client."""

    def delete_object(self, path: str) -> None: ...

    def upload_object(self, path: str, data: bytes) -> PathMetadata: ...

    def get_object_metadata(self, path: str) -> Dict[str, List[str]]: ...

    def get_object(self, path: str) -> ObjectStream: ...

    def list_objects(
        self,
        prefix: Optional[str] = None,
        page_token: Optional[str] = None,
        all_objects_in_mesh: bool = False,
    ) -> ListResponse: ...

    def close(self) -> None: ...


TransportFactory = Callable[[str, Mapping[str, List[str]]], ObjectTransport]


class ObjectStore:
    """Authenticated access to a Lattice object store.

    Each operation opens its own transport carrying both bearer tokens and
    closes it before returning, so a failure never leaks a session.

    Example:
        connection = ConnectionParameters(
            base_url="https://example.lattice.test", vm_token="vm", env_token="env"
        )
        store = ObjectStore(connection)
        metadata = store.upload("report.pdf", "/reports/report.pdf", time_to_live="24h")
        for entry in store.list(prefix="/reports/"):
            print(entry.path)
    """

    def __init__(
        self,
        connection: ConnectionParameters,
        transport_factory: TransportFactory = RestClient,
    ) -> None:
        """Initialize the façade.

        Args:
            connection: Base URL and bearer tokens
            transport_factory: Builds a transport from a base URL and headers
        """
        self.connection = connection
        self._transport_factory = transport_factory

    def _transport(
        self, additional_headers: Optional[Mapping[str, List[str]]] = None
    ) -> ObjectTransport:
        headers = build_headers(self.connection, additional_headers)
        return self._transport_factory(self.connection.base_url, headers)

    def delete(self, path: str) -> None:
        """Remove a path from the object store.

        Raises:
            RemoteError: If the service rejects the deletion
        """
        transport = self._transport()
        try:
            transport.delete_object(path)
        except ObjectStoreError as e:
            raise with_context(e, f"unable to delete path {path!r}") from e
        finally:
            transport.close()
        logger.info("Deleted %s", path)

    def upload(
        self,
        input_path: str,
        object_store_path: str,
        time_to_live: Optional[str] = None,
    ) -> PathMetadata:
        """Upload a local file, optionally with an expiry.

        The duration is validated before the file is read or any request is
        made. The whole file is read into memory and sent in one request.

        Args:
            input_path: Local file to upload
            object_store_path: Target path in the object store
            time_to_live: Duration string such as ``"10m"``; empty means no expiry

        Returns:
            Metadata of the stored object

        Raises:
            LocalInputError: If the duration cannot be parsed
            LocalIOError: If the file cannot be read
            RemoteError: If the upload is rejected
        """
        headers = ttl_headers(time_to_live)

        try:
            with open(input_path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise LocalIOError(f"unable to read file {input_path!r}: {e.strerror or e}") from e

        logger.debug("Uploading %d bytes from %s to %s", len(data), input_path, object_store_path)
        transport = self._transport(headers)
        try:
            metadata = transport.upload_object(object_store_path, data)
        except ObjectStoreError as e:
            raise with_context(
                e, f"unable to upload file {input_path!r} to {object_store_path!r}"
            ) from e
        finally:
            transport.close()
        return metadata

    def get_metadata(self, path: str) -> Dict[str, List[str]]:
        """Fetch the headers the service reports for a path.

        Raises:
            RemoteError: If the path is missing or the request fails
        """
        transport = self._transport()
        try:
            return transport.get_object_metadata(path)
        except ObjectStoreError as e:
            raise with_context(e, f"unable to get object metadata for path {path!r}") from e
        finally:
            transport.close()

    def download(self, object_store_path: str, output_path: str, replace: bool = False) -> int:
        """Copy an object's content into a local file.

        The remote object is opened first; the destination is created only
        once the service has accepted the request. Content is streamed to disk
        chunk by chunk.

        Args:
            object_store_path: Path in the object store
            output_path: Local destination
            replace: Truncate an existing destination instead of failing

        Returns:
            Number of bytes written

        Raises:
            RemoteError: If the object cannot be fetched or the stream breaks
            LocalIOError: If the destination cannot be created or written
        """
        transport = self._transport()
        try:
            try:
                stream = transport.get_object(object_store_path)
            except ObjectStoreError as e:
                raise with_context(
                    e, f"unable to get file {object_store_path!r} from object store"
                ) from e

            with stream:
                return self._copy(stream, object_store_path, output_path, replace)
        finally:
            transport.close()

    @staticmethod
    def _copy(stream: ObjectStream, object_store_path: str, output_path: str, replace: bool) -> int:
        mode = "wb" if replace else "xb"
        try:
            output = open(output_path, mode)
        except FileExistsError as e:
            raise LocalIOError(
                f"output path {output_path!r} already exists, pass replace to overwrite it"
            ) from e
        except OSError as e:
            raise LocalIOError(
                f"unable to create writer for {output_path!r}: {e.strerror or e}"
            ) from e

        copied = 0
        with output:
            try:
                for chunk in stream:
                    output.write(chunk)
                    copied += len(chunk)
            except RemoteError as e:
                raise with_context(
                    e, f"unable to read {object_store_path!r} (copied {copied} bytes)"
                ) from e
            except OSError as e:
                raise LocalIOError(
                    f"unable to write contents to file {output_path!r} "
                    f"(copied {copied} bytes): {e.strerror or e}"
                ) from e
        logger.info("Wrote %d bytes from %s to %s", copied, object_store_path, output_path)
        return copied

    def list(self, prefix: Optional[str] = None, all_objects_in_mesh: bool = False) -> Iterator[PathMetadata]:
        """Lazily list every path, page by page.

        The prefix is applied by the service, never locally. The transport
        stays open until the listing is exhausted, fails, or the generator
        is closed.

        Args:
            prefix: Only list paths starting with this prefix
            all_objects_in_mesh: Include objects held by other nodes in the mesh

        Yields:
            PathMetadata in server order

        Raises:
            RemoteError: If any page cannot be fetched
        """
        transport = self._transport()
        try:
            pages = PageIterator(
                lambda token: transport.list_objects(
                    prefix=prefix or None,
                    page_token=token,
                    all_objects_in_mesh=all_objects_in_mesh,
                )
            )
            for path_metadata in pages:
                yield path_metadata
        finally:
            transport.close()
