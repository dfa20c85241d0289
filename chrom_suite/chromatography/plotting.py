from matplotlib.figure import Figure
import matplotlib.pyplot as plt

from .chromatogram import Chromatogram


class VerticalLineAnnotation:
    """A vertical marker on a chromatogram plot.

    With a width of zero the annotation is a single line at `x`. Otherwise
    it is a band of the given width centred on `x`, filled with the line
    colour at `fill_alpha` opacity and outlined on both edges.

    Attributes:
        x (float): Retention time (seconds) of the line or band centre.
        width (float): Band width in seconds; 0 draws a single line.
        fill_alpha (float): Opacity (0-1) of the band filling.
        color (str): Matplotlib colour of the line or band.
        text (str): Optional label, may contain line breaks.
    """

    def __init__(
            self,
            x: float,
            width: float = 0.0,
            fill_alpha: float = 0.25,
            color: str = "black",
            text: str = ""
    ):
        self.x = x
        self.width = width
        self.fill_alpha = fill_alpha
        self.color = color
        self.text = text

    def move(self, delta: float) -> None:
        """Shift the annotation along the retention time axis."""
        self.x += delta

    def draw(self, ax) -> None:
        """Draw the annotation on a matplotlib axes."""
        if self.width == 0:
            ax.axvline(x=self.x, color=self.color)
            left = self.x
        else:
            left = self.x - self.width / 2
            right = self.x + self.width / 2
            ax.axvspan(left, right, color=self.color, alpha=self.fill_alpha)
            ax.axvline(x=left, color=self.color)
            ax.axvline(x=right, color=self.color)

        if self.text:
            # Place the label just right of the (left) line, near the top.
            ax.annotate(
                self.text,
                xy=(left, 1.0),
                xycoords=("data", "axes fraction"),
                xytext=(5, -5),
                textcoords="offset points",
                va="top",
                family="monospace"
            )


def plot_chromatogram(
        chromatogram: Chromatogram,
        annotations: list[VerticalLineAnnotation] | None = None,
        title: str | None = None
) -> Figure:
    """Plot a chromatogram trace with optional vertical annotations.

    Args:
        chromatogram: The chromatogram to plot, sorted by retention time.
        annotations: Lines or bands to draw on top of the trace.
        title: Plot title. Defaults to the chromatogram name, or its m/z
            when it has no name.

    Returns:
        A matplotlib figure.
    """
    if title is None:
        title = chromatogram.name or f"Chromatogram for {chromatogram.get_mz()} Th"

    fig, ax = plt.subplots(figsize=(9, 6))
    ax.plot(chromatogram.rts, chromatogram.intensities, linestyle="-", color="black")
    for annotation in annotations or []:
        annotation.draw(ax)
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Intensity")
    ax.set_title(title)

    return fig
