import wave

from ..tvi.audio import SAMPLE_RATE_HZ, SAMPLE_WIDTH, CHANNELS


def write_ppm(path: str, width: int, height: int, rgb: bytes):
    if len(rgb) != width * height * 3:
        raise ValueError("rgb buffer size mismatch")

    header = f"P6\n{width} {height}\n255\n".encode("ascii")

    with open(path, "wb") as out_h:
        out_h.write(header + rgb)


def write_wav(path: str, pcm: bytes):
    with wave.open(path, "wb") as wav_h:
        wav_h.setnchannels(CHANNELS)
        wav_h.setsampwidth(SAMPLE_WIDTH)
        wav_h.setframerate(SAMPLE_RATE_HZ)
        wav_h.writeframes(pcm)
