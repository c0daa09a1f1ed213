import io

import pytest

from cmania.audio import AudioDevice, AudioManager, Channel, Sample, default_device


class FakeManager(AudioManager):
    def __init__(self, devices):
        self.devices = devices
        self.loaded = []
        self.opened = None

    def load(self, data):
        self.loaded.append(data)
        return data

    def load_sample(self, data):
        return data

    def audio_devices(self):
        return list(self.devices)

    def current_device(self):
        return self.opened

    @property
    def is_device_opened(self):
        return self.opened is not None

    def open_device(self, device):
        self.opened = device

    def close(self):
        self.opened = None


def test_default_device_found():
    devices = [AudioDevice(1, "a"), AudioDevice(2, "b", is_default=True)]
    assert default_device(FakeManager(devices)).id == 2


def test_default_device_missing():
    assert default_device(FakeManager([AudioDevice(1, "a")])) is None


def test_load_stream_reads_file():
    manager = FakeManager([])
    result = AudioManager.load_stream(manager, io.BytesIO(b"abc"))
    assert result == b"abc"
    assert manager.loaded == [b"abc"]


def test_open_and_close():
    manager = FakeManager([])
    device = AudioDevice(3, "c")
    manager.open_device(device)
    assert manager.current_device() == device
    assert manager.is_device_opened
    manager.close()
    assert not manager.is_device_opened


def test_interfaces_are_abstract():
    with pytest.raises(TypeError):
        Channel()
    with pytest.raises(TypeError):
        Sample()