"""
Unit tests for the HTTP client
"""
import httpx
import pytest

from client.api_client import ApiError, BackendUnavailableError, SongsApiClient

SONGS = [
    {"id": 2, "song_name": "bohemian rhapsody", "band_name": "queen", "year": 1975},
    {"id": 1, "song_name": "hey jude", "band_name": "the beatles", "year": 1968},
]


def make_client(handler, **kwargs):
    kwargs.setdefault("retry_factor", 0)
    return SongsApiClient("http://backend.test", transport=httpx.MockTransport(handler), **kwargs)


class TestReads:

    def test_get_songs(self):
        def handler(request):
            assert request.method == "GET"
            assert request.url.path == "/songs"
            return httpx.Response(200, json=SONGS)

        with make_client(handler) as client:
            songs = client.get_songs()

        assert [s.band_name for s in songs] == ["queen", "the beatles"]

    def test_get_songs_retries_server_errors(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503, json={"error": "unavailable"})
            return httpx.Response(200, json=SONGS)

        songs = make_client(handler).get_songs()

        assert len(calls) == 3
        assert len(songs) == 2

    def test_get_songs_gives_up_after_max_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, json={"error": "Failed to fetch songs: boom"})

        with pytest.raises(ApiError) as exc_info:
            make_client(handler, max_retries=3).get_songs()

        assert len(calls) == 4
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to fetch songs: boom"

    def test_client_errors_are_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, json={"detail": "Not Found"})

        with pytest.raises(ApiError) as exc_info:
            make_client(handler).get_songs()

        assert len(calls) == 1
        assert exc_info.value.is_client_error

    def test_unreachable_backend(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(BackendUnavailableError, match="Cannot reach backend"):
            make_client(handler, max_retries=1).get_songs()


class TestMutations:

    def test_upload_csv(self, tmp_path):
        csv_file = tmp_path / "songs.csv"
        csv_file.write_bytes(b"band,song,year\nQueen,Bohemian Rhapsody,1975\n")

        def handler(request):
            assert request.url.path == "/songs/upload-csv"
            assert request.headers["content-type"].startswith("multipart/form-data")
            body = request.read()
            assert b'name="file"; filename="songs.csv"' in body
            assert b"Queen,Bohemian Rhapsody,1975" in body
            return httpx.Response(200, json={"message": "Successfully uploaded 1 songs", "count": 1})

        response = make_client(handler).upload_csv(csv_file)

        assert response.message == "Successfully uploaded 1 songs"
        assert response.count == 1

    def test_upload_failure_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, json={"error": "Failed to process CSV file: Database error"})

        with pytest.raises(ApiError, match="Failed to process CSV file"):
            make_client(handler).upload_csv_bytes("songs.csv", b"song,band,year\n")

        assert len(calls) == 1

    def test_import_sample(self):
        def handler(request):
            assert request.method == "POST"
            assert request.url.path == "/songs/import"
            return httpx.Response(200, json={"message": "Successfully imported 12 songs from file", "count": 12})

        assert make_client(handler).import_sample().count == 12

    def test_error_without_json_body(self):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        with pytest.raises(ApiError, match="Bad Gateway"):
            make_client(handler).import_sample()


class TestHealth:

    def test_healthy(self):
        def handler(request):
            return httpx.Response(200, json={"status": "ok", "timestamp": "t", "uptime": 1.0})

        assert make_client(handler).health_check() is True

    def test_unhealthy(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        assert make_client(handler).health_check() is False

    def test_base_url_is_normalized(self):
        client = SongsApiClient("http://backend.test/", transport=httpx.MockTransport(lambda r: None))
        assert client.base_url == "http://backend.test"
