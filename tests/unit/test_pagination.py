"""Unit tests for PageIterator."""

from typing import List, Optional

import pytest

from lattice_objects.exceptions import RemoteError, ServerError
from lattice_objects.models import ContentIdentifier, ListResponse, PathMetadata
from lattice_objects.pagination import PageIterator


def page(paths: List[str], next_page_token: Optional[str] = None) -> ListResponse:
    return ListResponse(
        path_metadatas=[
            PathMetadata(content_identifier=ContentIdentifier(path=p)) for p in paths
        ],
        next_page_token=next_page_token,
    )


class FakePages:
    """Serves canned pages keyed by token and records the tokens asked for."""

    def __init__(self, pages: dict) -> None:
        self.pages = pages
        self.tokens: List[Optional[str]] = []

    def __call__(self, token: Optional[str]) -> ListResponse:
        self.tokens.append(token)
        result = self.pages[token]
        if isinstance(result, Exception):
            raise result
        return result


class TestPageIterator:
    """Test cases for PageIterator."""

    def test_single_page(self) -> None:
        """Test a listing that fits in one page."""
        fetch = FakePages({None: page(["a", "b"])})

        assert [m.path for m in PageIterator(fetch)] == ["a", "b"]
        assert fetch.tokens == [None]

    def test_multiple_pages_in_order(self) -> None:
        """Test items from every page, in server order."""
        fetch = FakePages(
            {
                None: page(["a", "b"], "t1"),
                "t1": page(["c"], "t2"),
                "t2": page(["d", "e"]),
            }
        )
        pages = PageIterator(fetch)

        assert [m.path for m in pages] == ["a", "b", "c", "d", "e"]
        assert fetch.tokens == [None, "t1", "t2"]
        assert pages.pages_fetched == 3

    def test_empty_page_in_the_middle(self) -> None:
        """Test an empty page with a token does not end the listing."""
        fetch = FakePages({None: page([], "t1"), "t1": page(["a"], "")})

        assert [m.path for m in PageIterator(fetch)] == ["a"]

    def test_empty_listing(self) -> None:
        """Test a listing with nothing in it."""
        assert list(PageIterator(FakePages({None: page([])}))) == []

    def test_lazy(self) -> None:
        """Test no page is fetched until iteration starts."""
        fetch = FakePages({None: page(["a"], "t1"), "t1": page(["b"])})
        pages = PageIterator(fetch)
        assert fetch.tokens == []

        assert next(pages).path == "a"
        assert fetch.tokens == [None]

    def test_error_on_later_page(self) -> None:
        """Test a failure after the first page is raised, after earlier items."""
        fetch = FakePages(
            {None: page(["a"], "t1"), "t1": ServerError("unavailable", status_code=503)}
        )
        pages = PageIterator(fetch)

        assert next(pages).path == "a"
        with pytest.raises(ServerError) as exc_info:
            next(pages)
        assert "unable to list page 2" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ServerError)

    def test_exhausted_after_error(self) -> None:
        """Test the iterator cannot be resumed after a failure."""
        fetch = FakePages({None: RemoteError("boom")})
        pages = PageIterator(fetch)

        with pytest.raises(RemoteError):
            next(pages)
        assert list(pages) == []
        assert fetch.tokens == [None]

    def test_not_restartable(self) -> None:
        """Test a finished iterator stays finished."""
        fetch = FakePages({None: page(["a"])})
        pages = PageIterator(fetch)

        assert len(list(pages)) == 1
        assert list(pages) == []
        assert fetch.tokens == [None]

    def test_large_page_in_order(self) -> None:
        """Test a page with many entries is drained front to back."""
        paths = [f"obj/{i:05d}" for i in range(20000)]
        fetch = FakePages({None: page(paths, "t1"), "t1": page(["last"])})

        assert [m.path for m in PageIterator(fetch)] == paths + ["last"]
