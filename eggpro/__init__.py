"""EggPro signup OTP and payment verification backend."""

__version__ = "0.1.0"
