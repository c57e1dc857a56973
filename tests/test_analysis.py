"""Tests for analysis subsystem."""

import numpy as np
import pytest

from mdstream import ConfigurationError
from mdstream.analysis import (
    AnalysisOptions,
    Histogram,
    RadialDistribution,
    RdfOptions,
    StepRange,
    TrajectoryAnalysis,
    run_analysis,
)
from mdstream.system import Frame, OrthorhombicCell, Topology


class RecordingAnalysis(TrajectoryAnalysis):
    """Analysis remembering the calls made by the harness."""

    def __init__(self, options, fail_setup=False):
        self._options = options
        self.fail_setup = fail_setup
        self.calls = []
        self.steps = []

    @property
    def options(self):
        return self._options

    def setup(self):
        self.calls.append("setup")
        if self.fail_setup:
            raise ConfigurationError("invalid analysis")
        return Histogram(10, 0.0, 10.0)

    def accumulate(self, frame, histogram):
        self.calls.append("accumulate")
        self.steps.append(frame.step)
        histogram.insert_at(frame.positions[1, 0])

    def finish(self, histogram):
        self.calls.append("finish")


@pytest.fixture
def dimer_frame():
    """Two atoms 1.05 A apart in a cubic cell."""
    return Frame(
        positions=np.array([[0.0, 0.0, 0.0], [1.05, 0.0, 0.0]]),
        cell=OrthorhombicCell(10.0, 10.0, 10.0),
    )


class TestRunAnalysis:
    """Tests for the streaming analysis harness."""

    def test_visits_steps(self, moving_pair):
        """Test that only the selected steps are visited, in order."""
        analysis = RecordingAnalysis(
            AnalysisOptions(str(moving_pair), steps=StepRange.parse("2:10:3"))
        )
        histogram = run_analysis(analysis)

        assert analysis.steps == [2, 5, 8]
        assert analysis.calls == ["setup"] + ["accumulate"] * 3 + ["finish"]
        assert histogram.bins.sum() == 3.0

    def test_visits_all_steps(self, moving_pair):
        """Test that the default steps visit the whole trajectory."""
        analysis = RecordingAnalysis(AnalysisOptions(str(moving_pair)))
        run_analysis(analysis)

        assert analysis.steps == list(range(11))

    def test_setup_before_io(self, temp_dir):
        """Test that configuration errors come before opening files."""
        analysis = RecordingAnalysis(
            AnalysisOptions(str(temp_dir / "missing.xyz")), fail_setup=True
        )
        with pytest.raises(ConfigurationError):
            run_analysis(analysis)
        assert analysis.calls == ["setup"]

    def test_missing_file(self, temp_dir):
        """Test that a missing trajectory raises errors."""
        analysis = RecordingAnalysis(AnalysisOptions(str(temp_dir / "missing.xyz")))
        with pytest.raises(OSError):
            run_analysis(analysis)
        assert "finish" not in analysis.calls


class TestRadialDistribution:
    """Tests for RDF analysis."""

    def test_rdf_creation(self):
        """Test RDF setup."""
        rdf = RadialDistribution(RdfOptions("water.xyz", rmax=5.0, npoints=50))
        histogram = rdf.setup()

        assert rdf.rmax == 5.0
        assert len(histogram) == 50
        assert histogram.upper_bound == 5.0
        assert rdf.n_frames == 0

    def test_rdf_reset(self):
        """Test RDF reset."""
        rdf = RadialDistribution(RdfOptions("water.xyz"))
        rdf._n_frames = 10
        rdf.reset()

        assert rdf.n_frames == 0
        assert rdf.n_pairs == 0

    def test_default_output(self):
        """Test the default output file name."""
        assert RdfOptions("water.xyz").outfile == "water.xyz.rdf"
        assert RdfOptions("water.xyz", output="g.dat").outfile == "g.dat"

    def test_cell_sets_rmax(self):
        """Test that a custom cell uses half its smallest length as rmax."""
        rdf = RadialDistribution(
            RdfOptions("water.xyz", rmax=20.0, cell=OrthorhombicCell(8.0, 10.0, 12.0))
        )
        histogram = rdf.setup()

        assert rdf.rmax == 4.0
        assert histogram.upper_bound == 4.0

    def test_reject_three_atoms(self, temp_dir):
        """Test that angle selections are rejected before opening the file."""
        rdf = RadialDistribution(
            RdfOptions(str(temp_dir / "missing.xyz"), selection="angles: all")
        )
        with pytest.raises(ConfigurationError, match="more than two atoms"):
            run_analysis(rdf)

    def test_reject_invalid_syntax(self, temp_dir):
        """Test that invalid selections are rejected before opening the file."""
        rdf = RadialDistribution(
            RdfOptions(str(temp_dir / "missing.xyz"), selection="name O and (")
        )
        with pytest.raises(ConfigurationError, match="invalid selection"):
            rdf.setup()
        with pytest.raises(ConfigurationError):
            run_analysis(rdf)

    def test_invalid_points(self):
        """Test that the number of points must be positive."""
        rdf = RadialDistribution(RdfOptions("water.xyz", npoints=0))
        with pytest.raises(ValueError):
            rdf.setup()

    def test_no_self_pairs(self, temp_dir):
        """Test that an atom is never paired with itself."""
        frame = Frame(positions=np.array([[1.0, 1.0, 1.0]]))
        rdf = RadialDistribution(
            RdfOptions("single.xyz", output=str(temp_dir / "out.rdf"))
        )
        histogram = rdf.setup()
        rdf.accumulate(frame, histogram)

        assert len(rdf.pairs(frame)) == 0
        assert rdf.n_pairs == 0
        assert histogram.bins.sum() == 0.0

        rdf.finish(histogram)
        assert np.all(rdf.g_r == 0.0)

    def test_pairs_from_selection(self):
        """Test pairs from single and pair selections."""
        frame = Frame(
            positions=np.zeros((3, 3)),
            topology=Topology(n_atoms=3, names=["O", "H", "H"]),
        )
        rdf = RadialDistribution(RdfOptions("water.xyz"))
        rdf.setup()
        assert sorted(map(tuple, rdf.pairs(frame).tolist())) == [
            (0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1)
        ]

        rdf = RadialDistribution(RdfOptions("water.xyz", selection="pairs: name O; name H"))
        rdf.setup()
        assert sorted(map(tuple, rdf.pairs(frame).tolist())) == [(0, 1), (0, 2)]

    def test_normalization(self, dimer_frame, temp_dir):
        """Test g(r) of a single pair against the closed form."""
        outfile = temp_dir / "out.rdf"
        rdf = RadialDistribution(
            RdfOptions("dimer.xyz", output=str(outfile), rmax=5.0, npoints=50)
        )
        histogram = rdf.setup()
        rdf.accumulate(dimer_frame, histogram)
        rdf.finish(histogram)

        # both (0, 1) and (1, 0) at 1.05 A, density 2 / 1000 A^-3
        expected = 2.0 / (2e-6 * 4 * np.pi * 0.002 * 2 * 0.1 * 1.05**2)
        assert rdf.n_pairs == 2
        assert np.isclose(rdf.g_r[10], expected)
        assert np.count_nonzero(rdf.g_r) == 1

        lines = outfile.read_text().splitlines()
        assert lines[0] == "# Radial distribution function in trajectory dimer.xyz"
        assert lines[1] == "# Selection: all"
        data = np.loadtxt(outfile)
        assert data.shape == (50, 2)
        assert np.allclose(data[:, 0], np.arange(50) * 0.1)
        assert np.isclose(data[10, 1], expected, rtol=1e-5)

    def test_minimum_image(self, temp_dir):
        """Test that distances use the minimum image convention."""
        frame = Frame(
            positions=np.array([[0.5, 0.0, 0.0], [9.45, 0.0, 0.0]]),
            cell=OrthorhombicCell(10.0, 10.0, 10.0),
        )
        rdf = RadialDistribution(
            RdfOptions("pbc.xyz", output=str(temp_dir / "out.rdf"), rmax=5.0, npoints=50)
        )
        histogram = rdf.setup()
        rdf.accumulate(frame, histogram)

        assert histogram[10] == 2.0

    def test_rdf_from_trajectory(self, moving_pair):
        """Test RDF over the visited steps of a trajectory file."""
        rdf = RadialDistribution(
            RdfOptions(
                str(moving_pair),
                cell=OrthorhombicCell(10.0, 10.0, 10.0),
                steps=StepRange(0, 10, 5),
                npoints=50,
            )
        )
        run_analysis(rdf)

        assert rdf.n_frames == 3
        assert rdf.n_pairs == 6
        assert np.count_nonzero(rdf.g_r) == 3
        assert len(rdf.r) == 50
        # default output next to the trajectory
        assert moving_pair.with_name(moving_pair.name + ".rdf").exists()

    def test_plot(self, dimer_frame, temp_dir):
        """Test that the RDF can be plotted to a file."""
        pytest.importorskip("matplotlib")
        image = temp_dir / "rdf.png"
        rdf = RadialDistribution(
            RdfOptions(
                "dimer.xyz",
                output=str(temp_dir / "out.rdf"),
                rmax=5.0,
                npoints=50,
                plot=str(image),
            )
        )
        histogram = rdf.setup()
        rdf.accumulate(dimer_frame, histogram)
        rdf.finish(histogram)

        assert image.exists()
