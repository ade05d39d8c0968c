# app/client/speech.py
from enum import Enum
from typing import Hashable, Protocol


class SpeechState(str, Enum):
    IDLE = "idle"
    SPEAKING = "speaking"
    PAUSED = "paused"


class SpeechEngine(Protocol):
    def speak(self, text: str, rate: float, pitch: float, volume: float) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def cancel(self) -> None: ...


class SpeechController:
    """
    Read-aloud support for the About and Ecosystem pages.

    There is a single utterance slot per browsing context. The controller
    owns it and moves between three states:

        IDLE     --speak-->   SPEAKING   (any previous utterance is cancelled first)
        SPEAKING --pause-->   PAUSED
        PAUSED   --resume-->  SPEAKING
        any      --stop-->    IDLE

    Hiding the tab, navigating away or unloading the page also stop speech.
    The actual synthesis is delegated to a SpeechEngine (the browser's
    speechSynthesis in the web client).
    """

    def __init__(
        self,
        engine: SpeechEngine,
        rate: float = 0.9,
        pitch: float = 1.0,
        volume: float = 1.0,
    ):
        self.engine = engine
        self.rate = rate
        self.pitch = pitch
        self.volume = volume
        self.state = SpeechState.IDLE
        # Which section of the page owns the slot (None when idle)
        self.active_key: Hashable | None = None

    def speak(self, text: str, key: Hashable | None = None) -> None:
        # cancel() is synchronous: the old utterance is gone before the new one starts
        self.engine.cancel()
        self.engine.speak(text, self.rate, self.pitch, self.volume)
        self.state = SpeechState.SPEAKING
        self.active_key = key

    def pause(self) -> bool:
        if self.state is not SpeechState.SPEAKING:
            return False
        self.engine.pause()
        self.state = SpeechState.PAUSED
        return True

    def resume(self) -> bool:
        if self.state is not SpeechState.PAUSED:
            return False
        self.engine.resume()
        self.state = SpeechState.SPEAKING
        return True

    def stop(self) -> None:
        self.engine.cancel()
        self.state = SpeechState.IDLE
        self.active_key = None

    def finished(self, key: Hashable | None = None) -> None:
        """
        The engine reports that the utterance started for `key` ended.

        End events also fire for cancelled utterances, so one that no
        longer owns the slot is ignored.
        """
        if key != self.active_key:
            return
        self.state = SpeechState.IDLE
        self.active_key = None

    def toggle(self, text: str, key: Hashable) -> SpeechState:
        """
        Play/pause button of one section.

        Idle or another section speaking -> start this section;
        this section speaking -> pause; this section paused -> resume.
        """
        if self.active_key == key and self.state is SpeechState.SPEAKING:
            self.pause()
        elif self.active_key == key and self.state is SpeechState.PAUSED:
            self.resume()
        else:
            self.speak(text, key)
        return self.state

    def state_for(self, key: Hashable) -> SpeechState:
        return self.state if key == self.active_key else SpeechState.IDLE

    # ---- page lifecycle triggers ----

    def on_visibility_change(self, hidden: bool) -> None:
        if hidden:
            self.stop()

    def on_navigate(self) -> None:
        self.stop()

    def on_unload(self) -> None:
        self.stop()
