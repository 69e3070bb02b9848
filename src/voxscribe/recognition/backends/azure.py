"""Azure AI Speech continuous recognition backend."""

from __future__ import annotations

import logging
from typing import Any

from voxscribe.errors import ConfigError
from voxscribe.io.audio import AudioContainerFormat, AudioSource
from voxscribe.recognition.base import (
    CancellationReason,
    Canceled,
    EventSink,
    Recognized,
    Recognizing,
    ResultReason,
)

logger = logging.getLogger(__name__)

_SDK_FORMAT_NAMES = {
    AudioContainerFormat.ANY: "ANY",
    AudioContainerFormat.ALAW: "ALAW",
    AudioContainerFormat.AMRNB: "AMRNB",
    AudioContainerFormat.AMRWB: "AMRWB",
    AudioContainerFormat.FLAC: "FLAC",
    AudioContainerFormat.MP3: "MP3",
    AudioContainerFormat.OGG_OPUS: "OGG_OPUS",
    AudioContainerFormat.MULAW: "MULAW",
}


class AzureSpeechBackend:
    """Recognize a pushed, compressed audio stream with the Speech SDK.

    Args:
        region: Azure region of the Speech resource (e.g. "westus2").
        key: Speech resource subscription key.
        language: Recognition language, BCP-47 (e.g. "en-US").
    """

    name = "azure"

    def __init__(self, *, region: str | None, key: str | None, language: str) -> None:
        if not region or not key:
            raise ConfigError(
                "Environment variables AZURE_AI_SPEECH_REGION and/or "
                "AZURE_AI_SPEECH_KEY are not set."
            )
        try:
            import azure.cognitiveservices.speech as speechsdk
        except ModuleNotFoundError as exc:
            raise ConfigError(
                "The azure backend requires azure-cognitiveservices-speech. "
                "Install the `azure` extra."
            ) from exc
        self._sdk: Any = speechsdk
        self._region = region
        self._key = key
        self._language = language
        self._recognizer: Any = None

    def start(self, source: AudioSource, on_event: EventSink) -> None:
        sdk = self._sdk
        speech_config = sdk.SpeechConfig(subscription=self._key, region=self._region)
        speech_config.speech_recognition_language = self._language

        container = getattr(sdk.AudioStreamContainerFormat, _SDK_FORMAT_NAMES[source.container_format])
        stream_format = sdk.audio.AudioStreamFormat(compressed_stream_format=container)
        push_stream = sdk.audio.PushAudioInputStream(stream_format=stream_format)
        source.push_to(push_stream)

        audio_config = sdk.audio.AudioConfig(stream=push_stream)
        recognizer = sdk.SpeechRecognizer(speech_config=speech_config, audio_config=audio_config)
        recognizer.recognizing.connect(lambda evt: on_event(Recognizing(evt.result.text or "")))
        recognizer.recognized.connect(lambda evt: on_event(self._recognized(evt)))
        recognizer.canceled.connect(lambda evt: on_event(self._canceled(evt)))

        self._recognizer = recognizer
        logger.debug("Starting Azure continuous recognition (%s)", self._region)
        recognizer.start_continuous_recognition_async().get()

    def stop(self) -> None:
        if self._recognizer is None:
            return
        recognizer, self._recognizer = self._recognizer, None
        recognizer.stop_continuous_recognition_async().get()

    def _recognized(self, evt: Any) -> Recognized:
        result = evt.result
        if result.reason == self._sdk.ResultReason.RecognizedSpeech:
            return Recognized(ResultReason.RECOGNIZED_SPEECH, result.text or "")
        return Recognized(ResultReason.NO_MATCH, result.text or "")

    def _canceled(self, evt: Any) -> Canceled:
        details = evt.cancellation_details
        reasons = self._sdk.CancellationReason
        if details.reason == reasons.EndOfStream:
            return Canceled(CancellationReason.END_OF_STREAM)
        if details.reason == reasons.Error:
            return Canceled(
                CancellationReason.ERROR,
                error_code=_enum_name(details.code),
                error_details=details.error_details,
            )
        return Canceled(CancellationReason.OTHER, error_details=str(details.reason))


def _enum_name(value: Any) -> str:
    return str(getattr(value, "name", value))
