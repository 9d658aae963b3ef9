from .audio import AudioFrame, parse_audio_frame, SAMPLE_RATE_HZ
from .video import VideoFrame, parse_video_frame, WIDTH, HEIGHT
from .reader import TviReader
