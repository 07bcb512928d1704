"""ratelock — lock media playback rates against page interference."""

__version__ = "0.3.0"
