"""REST client for the Lattice object store."""

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Type, TypeVar, Union
from urllib.parse import quote

import requests
from pydantic import BaseModel

from lattice_objects.exceptions import (
    AuthenticationError,
    ConnectionError,
    LocalInputError,
    ObjectNotFoundError,
    RemoteError,
    ServerError,
    TimeoutError,
    ValidationError,
)
from lattice_objects.models import ConnectionParameters, ListResponse, PathMetadata

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

AUTHORIZATION_HEADER = "authorization"
SANDBOX_AUTHORIZATION_HEADER = "anduril-sandbox-authorization"

CHUNK_SIZE = 64 * 1024


def build_headers(
    connection: ConnectionParameters,
    additional_headers: Optional[Mapping[str, List[str]]] = None,
) -> Dict[str, List[str]]:
    """Build the headers sent with every request.

    Both bearer tokens are always present. Additional headers are merged in,
    but never replace either authorization header.

    Args:
        connection: Connection parameters holding the tokens
        additional_headers: Extra headers, name to list of values

    Returns:
        Mapping of header name to its values
    """
    headers: Dict[str, List[str]] = {
        AUTHORIZATION_HEADER: [f"Bearer {connection.vm_token}"],
        SANDBOX_AUTHORIZATION_HEADER: [f"Bearer {connection.env_token}"],
    }
    reserved = {AUTHORIZATION_HEADER, SANDBOX_AUTHORIZATION_HEADER}

    for name, values in (additional_headers or {}).items():
        if name.lower() in reserved:
            logger.warning("Ignoring additional header %s: it would replace a credential", name)
            continue
        headers.setdefault(name, []).extend(values)
    return headers


class ObjectStream:
    """Read-once stream of an object's bytes.

    Wraps a streamed response; use it as a context manager so the connection
    is released whether or not the content was fully consumed.
    """

    def __init__(self, response: requests.Response, path: str, chunk_size: int = CHUNK_SIZE) -> None:
        self._response = response
        self.path = path
        self.chunk_size = chunk_size
        self._consumed = False

    def __iter__(self) -> Iterator[bytes]:
        if self._consumed:
            raise RuntimeError(f"stream for {self.path!r} has already been read")
        self._consumed = True
        return self._chunks()

    def _chunks(self) -> Iterator[bytes]:
        try:
            for chunk in self._response.iter_content(chunk_size=self.chunk_size):
                if chunk:
                    yield chunk
        except requests.exceptions.Timeout:
            raise TimeoutError("Timed out reading object content")
        except (
            requests.exceptions.ConnectionError,
            requests.exceptions.ChunkedEncodingError,
        ) as e:
            raise ConnectionError(f"Connection lost reading object content: {str(e)}")
        except requests.exceptions.RequestException as e:
            raise RemoteError(f"Unable to read object content: {str(e)}")

    def close(self) -> None:
        """Release the underlying connection."""
        self._response.close()

    def __enter__(self) -> "ObjectStream":
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()


class RestClient:
    """REST client for the Lattice object store."""

    def __init__(
        self,
        base_url: str,
        headers: Optional[Mapping[str, List[str]]] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize REST client.

        Args:
            base_url: Base URL of the Lattice environment
            headers: Headers sent with every request, name to list of values
            timeout: Request timeout in seconds, None for no timeout
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        for name, values in (headers or {}).items():
            self.session.headers[name] = ", ".join(values)

    def _url(self, path: Optional[str] = None) -> str:
        """Construct the URL of the objects collection, or of one object.

        The object path is escaped as a single segment.

        Args:
            path: Object path

        Returns:
            Full URL
        """
        url = f"{self.base_url}/api/v1/objects"
        if path is None:
            return url
        return f"{url}/{quote(path, safe='')}"

    def _handle_error(self, response: requests.Response, path: Optional[str] = None) -> None:
        """Handle HTTP error responses.

        Args:
            response: HTTP response
            path: Object path the request addressed, if any

        Raises:
            RemoteError: For various error conditions
        """
        if response.status_code == 404:
            raise ObjectNotFoundError(path or response.url)
        elif response.status_code in (401, 403):
            raise AuthenticationError(
                f"Authentication failed: {self._error_message(response, 'access denied')}",
                status_code=response.status_code,
            )
        elif response.status_code == 400:
            raise ValidationError(self._error_message(response, "Validation error"))
        elif response.status_code >= 500:
            raise ServerError(
                self._error_message(response, "Server error"),
                status_code=response.status_code,
            )
        else:
            raise RemoteError(
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

    @staticmethod
    def _error_message(response: requests.Response, default: str) -> str:
        try:
            message = response.json().get("message")
        except (ValueError, AttributeError):
            message = None
        return message or response.text or default

    def _request(self, method: str, url: str, path: Optional[str] = None, **kwargs: Any) -> requests.Response:
        """Issue one request and raise for any non-2xx status.

        Raises:
            LocalInputError: If the URL or headers cannot form a request
            RemoteError: On failure
        """
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            raise TimeoutError("Request timed out")
        except requests.exceptions.ConnectionError as e:
            raise ConnectionError(f"Connection failed: {str(e)}")
        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
            requests.exceptions.InvalidHeader,
        ) as e:
            raise LocalInputError(f"Invalid request: {str(e)}")
        except requests.exceptions.RequestException as e:
            raise RemoteError(f"Request failed: {str(e)}")

        logger.debug("%s %s -> %d", method, url, response.status_code)
        if not response.ok:
            try:
                self._handle_error(response, path)
            finally:
                response.close()
        return response

    def delete_object(self, path: str) -> None:
        """Delete an object.

        Args:
            path: Object path

        Raises:
            RemoteError: On failure
        """
        self._request("DELETE", self._url(path), path).close()

    def upload_object(self, path: str, data: bytes) -> PathMetadata:
        """Upload an object.

        Args:
            path: Target object path
            data: Object content

        Returns:
            Metadata of the stored object

        Raises:
            RemoteError: On failure
        """
        response = self._request(
            "POST",
            self._url(path),
            path,
            data=data,
            headers={"Content-Type": "application/octet-stream"},
        )
        return self._parse(response, PathMetadata)

    def get_object_metadata(self, path: str) -> Dict[str, List[str]]:
        """Fetch the headers describing an object, without its content.

        Args:
            path: Object path

        Returns:
            Response headers, name to list of values

        Raises:
            RemoteError: On failure
        """
        response = self._request("HEAD", self._url(path), path)
        response.close()
        return {name: [value] for name, value in response.headers.items()}

    def get_object(self, path: str) -> ObjectStream:
        """Open an object's content for streaming.

        Args:
            path: Object path

        Returns:
            ObjectStream over the content; the caller must close it

        Raises:
            RemoteError: On failure
        """
        response = self._request("GET", self._url(path), path, stream=True)
        return ObjectStream(response, path)

    def list_objects(
        self,
        prefix: Optional[str] = None,
        page_token: Optional[str] = None,
        all_objects_in_mesh: bool = False,
    ) -> ListResponse:
        """Fetch one page of a listing.

        Args:
            prefix: Only list paths starting with this prefix (server side)
            page_token: Token from the previous page
            all_objects_in_mesh: List objects from every node in the mesh

        Returns:
            ListResponse for the page

        Raises:
            RemoteError: On failure
        """
        params: Dict[str, Union[str, bool]] = {}
        if prefix:
            params["prefix"] = prefix
        if page_token:
            params["pageToken"] = page_token
        if all_objects_in_mesh:
            params["allObjectsInMesh"] = "true"

        response = self._request("GET", self._url(), params=params)
        return self._parse(response, ListResponse)

    @staticmethod
    def _parse(response: requests.Response, model: Type[ModelT]) -> ModelT:
        try:
            return model.model_validate(response.json())
        except ValueError as e:
            raise RemoteError(f"Malformed response from {response.url}: {str(e)}")

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self) -> "RestClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
