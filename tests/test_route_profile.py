"""
Route Profile Tests

Unit tests for GPX route parsing and summaries.
"""

import pytest
from ridescore.analysis.route_profile import (
    gradient_band,
    GradientBand,
    RoutePoint,
    RouteProfile,
)


# Sample GPX data for testing
SAMPLE_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test">
  <trk>
    <name>Col Test</name>
    <trkseg>
      <trkpt lat="38.8977" lon="-77.0365">
        <ele>10</ele>
      </trkpt>
      <trkpt lat="38.8987" lon="-77.0365">
        <ele>20</ele>
      </trkpt>
      <trkpt lat="38.8997" lon="-77.0365">
        <ele>30</ele>
      </trkpt>
      <trkpt lat="38.9007" lon="-77.0365">
        <ele>25</ele>
      </trkpt>
      <trkpt lat="38.9017" lon="-77.0365">
        <ele>15</ele>
      </trkpt>
    </trkseg>
  </trk>
</gpx>
"""

# Planned route exported as <rte> instead of a track
ROUTE_ONLY_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test">
  <rte>
    <name>Boucle des Corbieres</name>
    <rtept lat="42.9000" lon="2.6000"><ele>200</ele></rtept>
    <rtept lat="42.9100" lon="2.6000"><ele>260</ele></rtept>
    <rtept lat="42.9200" lon="2.6000"><ele>240</ele></rtept>
  </rte>
</gpx>
"""

# Noisy elevation for smoothing tests
NOISY_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test">
  <trk>
    <name>Noisy Course</name>
    <trkseg>
      <trkpt lat="38.8977" lon="-77.0365"><ele>100</ele></trkpt>
      <trkpt lat="38.8987" lon="-77.0365"><ele>102</ele></trkpt>
      <trkpt lat="38.8997" lon="-77.0365"><ele>98</ele></trkpt>
      <trkpt lat="38.9007" lon="-77.0365"><ele>103</ele></trkpt>
      <trkpt lat="38.9017" lon="-77.0365"><ele>97</ele></trkpt>
      <trkpt lat="38.9027" lon="-77.0365"><ele>101</ele></trkpt>
      <trkpt lat="38.9037" lon="-77.0365"><ele>99</ele></trkpt>
      <trkpt lat="38.9047" lon="-77.0365"><ele>100</ele></trkpt>
      <trkpt lat="38.9057" lon="-77.0365"><ele>102</ele></trkpt>
      <trkpt lat="38.9067" lon="-77.0365"><ele>98</ele></trkpt>
    </trkseg>
  </trk>
</gpx>
"""

EMPTY_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test">
  <trk><name>Empty</name><trkseg></trkseg></trk>
</gpx>
"""


class TestRouteProfileParsing:
    """Tests for building profiles from GPX"""

    def test_parses_track_points(self):
        """Should read every track point with cumulative distance"""
        profile = RouteProfile.from_gpx(SAMPLE_GPX)

        assert len(profile.points) == 5
        assert profile.name == "Col Test"
        assert profile.points[0].distance_from_start_m == 0
        distances = [p.distance_from_start_m for p in profile.points]
        assert distances == sorted(distances)

    def test_falls_back_to_route_points(self):
        """Should use <rtept> when there is no track"""
        profile = RouteProfile.from_gpx(ROUTE_ONLY_GPX)

        assert len(profile.points) == 3
        assert profile.name == "Boucle des Corbieres"
        assert profile.points[1].elevation == 260

    def test_empty_gpx_raises_error(self):
        """GPX without points should raise ValueError"""
        with pytest.raises(ValueError, match="No track or route points"):
            RouteProfile.from_gpx(EMPTY_GPX)

    def test_missing_elevation_is_zero(self):
        """Points without elevation should default to 0"""
        profile = RouteProfile.from_coordinates([(45.0, 6.0, None), (45.01, 6.0, 100)])

        assert profile.points[0].elevation == 0.0
        assert profile.points[1].elevation == 100


class TestRouteProfileStats:
    """Tests for distance and elevation figures"""

    def test_total_distance_calculation(self):
        """Four 0.001 degree steps should be ~445m"""
        profile = RouteProfile.from_gpx(SAMPLE_GPX)
        distance = profile.get_total_distance_km()

        assert distance == pytest.approx(0.445, abs=0.01)

    def test_elevation_stats(self):
        """Should sum positive and negative elevation differences"""
        profile = RouteProfile.from_gpx(SAMPLE_GPX)
        stats = profile.get_elevation_stats()

        # 10 -> 20 -> 30 -> 25 -> 15
        assert stats['elevation_gain_m'] == pytest.approx(20)
        assert stats['elevation_loss_m'] == pytest.approx(15)

    def test_summary(self):
        """Summary should expose rounded totals and the map centre"""
        summary = RouteProfile.from_gpx(SAMPLE_GPX).summary()

        assert summary.total_distance_km == 0.4
        assert summary.total_elevation_gain_m == 20
        assert summary.total_elevation_loss_m == 15
        assert summary.min_elevation_m == 10
        assert summary.max_elevation_m == 30
        assert summary.center_lat == pytest.approx(38.8997)
        assert summary.points_count == 5

    def test_summary_to_dict(self):
        """Summary should export as a dictionary"""
        result = RouteProfile.from_gpx(SAMPLE_GPX).summary().to_dict()

        assert 'total_distance_km' in result
        assert 'total_elevation_gain_m' in result
        assert 'center_lon' in result

    def test_summary_of_empty_profile_raises(self):
        """An empty profile has nothing to summarize"""
        with pytest.raises(ValueError, match="No points"):
            RouteProfile([]).summary()

    def test_get_elevation_profile(self):
        """Should return sampled elevation profile"""
        profile = RouteProfile.from_gpx(NOISY_GPX)
        samples = profile.get_elevation_profile(num_points=5)

        assert len(samples) == 6  # num_points + 1
        assert 'distanceKm' in samples[0]
        assert 'elevation' in samples[0]


class TestElevationSmoothing:
    """Tests for Savitzky-Golay smoothing"""

    def test_smoothing_keeps_point_count(self):
        """Smoothing should not drop points"""
        profile = RouteProfile.from_gpx(NOISY_GPX, smooth=True)
        assert len(profile.points) == 10

    def test_smoothing_reduces_noisy_gain(self):
        """Smoothed D+ should be lower than raw D+ on a zigzag profile"""
        raw = RouteProfile.from_gpx(NOISY_GPX).get_elevation_stats()
        smoothed = RouteProfile.from_gpx(NOISY_GPX, smooth=True).get_elevation_stats()

        assert smoothed['elevation_gain_m'] < raw['elevation_gain_m']

    def test_short_series_returned_as_is(self):
        """Series shorter than the window should not be filtered"""
        short = [100.0, 110.0]
        assert RouteProfile._smooth_elevation(short) == short


class TestHaversineDistance:
    """Tests for haversine distance calculation"""

    def test_same_point_returns_zero(self):
        """Same coordinates should return 0 distance"""
        dist = RouteProfile._haversine_distance(
            38.8977, -77.0365, 38.8977, -77.0365
        )
        assert dist == pytest.approx(0, abs=0.1)

    def test_known_distance(self):
        """Should calculate correct distance for known points"""
        # ~111km per degree of latitude
        dist = RouteProfile._haversine_distance(0, 0, 1, 0)
        assert 110000 < dist < 112000


class TestRoutePoint:
    """Tests for manual profile construction"""

    def test_profile_from_points(self):
        """A profile can wrap precomputed points"""
        points = [
            RoutePoint(lat=45.0, lon=6.0, elevation=500, distance_from_start_m=0),
            RoutePoint(lat=45.1, lon=6.0, elevation=900, distance_from_start_m=11000),
        ]
        profile = RouteProfile(points, name="Manual")

        assert profile.get_total_distance_km() == pytest.approx(11.0)
        assert profile.get_elevation_stats()['elevation_gain_m'] == 400


def single_col_profile() -> RouteProfile:
    """6km out-and-back over one col: 10m per ~100m up, then down"""
    elevations = [100 + 10 * i for i in range(31)] + [400 - 10 * i for i in range(1, 31)]
    return RouteProfile.from_coordinates(
        [(45.0 + 0.0009 * i, 6.0, ele) for i, ele in enumerate(elevations)],
        name="Col Test",
    )


def rolling_profile(amplitude: float) -> RouteProfile:
    """6km of small rollers"""
    elevations = [200 + (amplitude if i % 4 < 2 else 0) for i in range(61)]
    return RouteProfile.from_coordinates(
        [(45.0 + 0.0009 * i, 6.0, ele) for i, ele in enumerate(elevations)]
    )


class TestGradientBand:
    """Tests for gradient band boundaries"""

    @pytest.mark.parametrize(
        "gradient,band",
        [
            (-6.0, GradientBand.DESCENT),
            (-1.0, GradientBand.FLAT),
            (2.9, GradientBand.FLAT),
            (3.0, GradientBand.EASY),
            (5.0, GradientBand.MODERATE),
            (8.0, GradientBand.HARD),
            (11.9, GradientBand.HARD),
            (12.0, GradientBand.EXTREME),
        ],
    )
    def test_bands(self, gradient, band):
        """Lower band edges are inclusive"""
        assert gradient_band(gradient) == band


class TestGradientSegments:
    """Tests for banded gradient segments"""

    def test_one_segment_per_point_pair(self):
        """Short routes get one segment per consecutive pair"""
        segments = single_col_profile().get_gradient_segments()

        assert len(segments) == 60
        assert segments[0].start_index == 0
        assert segments[-1].end_index == 60

    def test_climb_and_descent_bands(self):
        """~10% sections are hard going up, descent coming down"""
        segments = single_col_profile().get_gradient_segments()

        assert segments[10].gradient_percent == pytest.approx(10.0, abs=0.1)
        assert segments[10].band == GradientBand.HARD
        assert segments[45].gradient_percent == pytest.approx(-10.0, abs=0.1)
        assert segments[45].band == GradientBand.DESCENT

    def test_long_track_is_grouped(self):
        """Large tracks are capped near 200 segments"""
        profile = RouteProfile.from_coordinates(
            [(45.0 + 0.0001 * i, 6.0, 100) for i in range(1000)]
        )
        segments = profile.get_gradient_segments()

        assert len(segments) <= 200
        assert segments[0].end_index - segments[0].start_index == 5

    def test_single_point(self):
        """One point has no segments"""
        profile = RouteProfile.from_coordinates([(45.0, 6.0, 100)])
        assert profile.get_gradient_segments() == []

    def test_to_dict_uses_band_value(self):
        """Band is exported as its string value"""
        result = single_col_profile().get_gradient_segments()[10].to_dict()
        assert result['band'] == "hard"


class TestClimbDetection:
    """Tests for climb detection"""

    def test_single_col(self):
        """One col gives one climb, valley to summit"""
        climbs = single_col_profile().get_climbs()

        assert len(climbs) == 1
        climb = climbs[0]
        assert climb.name == "Climb 1"
        assert climb.start_index == 0
        assert climb.end_index == 30
        # Smoothed ends: 110m at the start, 388m at the summit
        assert climb.start_elevation_m == 110
        assert climb.end_elevation_m == 388
        assert climb.elevation_gain_m == 278
        assert climb.length_km == pytest.approx(3.0)
        assert climb.avg_gradient_percent == pytest.approx(9.3, abs=0.1)
        assert climb.max_gradient_percent == pytest.approx(10.0, abs=0.1)

    def test_small_rollers_are_not_climbs(self):
        """Bumps below the minimum gain are ignored"""
        assert rolling_profile(amplitude=8).get_climbs() == []

    def test_min_gain_is_configurable(self):
        """A higher minimum gain drops the col"""
        assert single_col_profile().get_climbs(min_gain_m=300) == []

    def test_too_few_points(self):
        """Fewer than 10 points gives no climbs"""
        assert RouteProfile.from_gpx(SAMPLE_GPX).get_climbs() == []

    def test_two_cols_are_split(self):
        """A deep valley between summits gives two climbs"""
        up = [100 + 10 * i for i in range(21)]
        down = [300 - 10 * i for i in range(1, 21)]
        elevations = up + down + [100 + 10 * i for i in range(1, 21)] + [300] * 5
        profile = RouteProfile.from_coordinates(
            [(45.0 + 0.0009 * i, 6.0, ele) for i, ele in enumerate(elevations)]
        )
        climbs = profile.get_climbs()

        assert [c.name for c in climbs] == ["Climb 1", "Climb 2"]
        assert climbs[0].end_index < climbs[1].start_index


class TestDescentDetection:
    """Tests for descent detection"""

    def test_single_col(self):
        """The way down from the col is one descent"""
        descents = single_col_profile().get_descents()

        assert len(descents) == 1
        descent = descents[0]
        assert descent.start_index == 30
        assert descent.end_index == 60
        assert descent.elevation_drop_m == 278
        assert descent.avg_gradient_percent == pytest.approx(-9.3, abs=0.1)

    def test_flat_route(self):
        """A flat route has no descents"""
        assert rolling_profile(amplitude=0).get_descents() == []
