"""loopvet - detects Go loop variables captured by escaping func literals."""

__version__ = "0.3.0"
