"""
Unit tests for YtDlpFetcher with yt_dlp.YoutubeDL mocked out.
"""

from unittest.mock import MagicMock, patch

import pytest
import yt_dlp

from yt_transcriber.acquisition.errors import MetadataFetchError, TransferError
from yt_transcriber.acquisition.fetcher import YtDlpFetcher
from yt_transcriber.acquisition.schema import DownloadStrategy


URL = "https://www.youtube.com/watch?v=jNQXAC9IVRw"

INFO = {
    "id": "jNQXAC9IVRw",
    "title": "Me at the zoo",
    "channel": "jawed",
    "uploader": "jawed",
    "upload_date": "20050424",
    "duration": 19,
    "webpage_url": URL,
    "description": "The first video on YouTube.",
    "tags": ["zoo"],
}


def _ydl(mock_cls):
    """The object bound by `with yt_dlp.YoutubeDL(params) as ydl`."""
    ydl = MagicMock()
    mock_cls.return_value.__enter__.return_value = ydl
    return ydl


def _writes(destination):
    """download() stand-in that leaves an mp3 at the destination."""
    def download(urls):
        destination.write_bytes(b"ID3")
        return 0
    return download


class TestFetchMetadata:

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_maps_info_fields(self, mock_cls):
        _ydl(mock_cls).extract_info.return_value = dict(INFO)

        metadata = YtDlpFetcher().fetch_metadata(URL)

        assert metadata.video_id == "jNQXAC9IVRw"
        assert metadata.title == "Me at the zoo"
        assert metadata.channel == "jawed"
        assert metadata.upload_date == "20050424"
        assert metadata.duration == 19.0
        assert isinstance(metadata.duration, float)
        assert metadata.webpage_url == URL
        assert metadata.tags == ["zoo"]

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_does_not_download(self, mock_cls):
        ydl = _ydl(mock_cls)
        ydl.extract_info.return_value = dict(INFO)

        YtDlpFetcher(socket_timeout=12).fetch_metadata(URL)

        params = mock_cls.call_args[0][0]
        assert params["skip_download"] is True
        assert params["socket_timeout"] == 12
        ydl.extract_info.assert_called_once_with(URL, download=False)

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_channel_falls_back_to_uploader(self, mock_cls):
        info = dict(INFO, channel=None, uploader="someone")
        _ydl(mock_cls).extract_info.return_value = info

        assert YtDlpFetcher().fetch_metadata(URL).channel == "someone"

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_download_error(self, mock_cls):
        _ydl(mock_cls).extract_info.side_effect = yt_dlp.utils.DownloadError("ERROR: Video unavailable")

        with pytest.raises(MetadataFetchError, match="Video unavailable"):
            YtDlpFetcher().fetch_metadata(URL)

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_age_restricted_suggests_cookies(self, mock_cls):
        _ydl(mock_cls).extract_info.side_effect = yt_dlp.utils.DownloadError("Sign in to confirm your age")

        with pytest.raises(MetadataFetchError) as exc_info:
            YtDlpFetcher().fetch_metadata(URL)

        assert any("cookies" in fix for fix in exc_info.value.suggested_fixes)

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_empty_info(self, mock_cls):
        _ydl(mock_cls).extract_info.return_value = None

        with pytest.raises(MetadataFetchError, match="No metadata"):
            YtDlpFetcher().fetch_metadata(URL)

    @pytest.mark.parametrize("duration", [None, "19", True])
    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_missing_duration(self, mock_cls, duration):
        _ydl(mock_cls).extract_info.return_value = dict(INFO, duration=duration)

        with pytest.raises(MetadataFetchError, match="duration"):
            YtDlpFetcher().fetch_metadata(URL)


class TestFetchAudio:

    @pytest.fixture
    def destination(self, tmp_path):
        return tmp_path / "cache" / "jNQXAC9IVRw.mp3"

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_primary_strategy_params(self, mock_cls, destination):
        destination.parent.mkdir()
        ydl = _ydl(mock_cls)
        ydl.download.side_effect = _writes(destination)

        path = YtDlpFetcher(sample_rate=16000).fetch_audio(URL, DownloadStrategy.PRIMARY, destination)

        assert path == destination
        params = mock_cls.call_args[0][0]
        assert params["format"] == "bestaudio"
        assert params["outtmpl"] == str(destination.parent / "jNQXAC9IVRw") + ".%(ext)s"
        assert params["overwrites"] is True
        assert params["postprocessors"] == [{"key": "FFmpegExtractAudio", "preferredcodec": "mp3"}]
        assert params["postprocessor_args"] == {"extractaudio": ["-ar", "16000"]}
        ydl.download.assert_called_once_with([URL])

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_alternate_strategy_uses_combined_streams(self, mock_cls, destination):
        destination.parent.mkdir()
        ydl = _ydl(mock_cls)
        ydl.download.side_effect = _writes(destination)

        YtDlpFetcher().fetch_audio(URL, DownloadStrategy.ALTERNATE, destination)

        params = mock_cls.call_args[0][0]
        assert params["format"] == "bestvideo+bestaudio/best"
        assert params["postprocessors"][0]["key"] == "FFmpegExtractAudio"

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_download_error_is_transfer_error(self, mock_cls, destination):
        _ydl(mock_cls).download.side_effect = yt_dlp.utils.DownloadError("HTTP Error 403")

        with pytest.raises(TransferError, match="403") as exc_info:
            YtDlpFetcher().fetch_audio(URL, DownloadStrategy.PRIMARY, destination)

        assert exc_info.value.strategy == DownloadStrategy.PRIMARY

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_missing_file_is_transfer_error(self, mock_cls, destination):
        _ydl(mock_cls).download.return_value = 0

        with pytest.raises(TransferError, match="produced no file"):
            YtDlpFetcher().fetch_audio(URL, DownloadStrategy.ALTERNATE, destination)

    @patch("yt_transcriber.acquisition.fetcher.yt_dlp.YoutubeDL")
    def test_nonzero_status_is_transfer_error(self, mock_cls, destination):
        _ydl(mock_cls).download.return_value = 1

        with pytest.raises(TransferError, match="status 1"):
            YtDlpFetcher().fetch_audio(URL, DownloadStrategy.PRIMARY, destination)
