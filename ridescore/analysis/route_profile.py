"""
Route Profile

Parses planned routes (GPX tracks or routes) into an ordered list of points
with elevation and cumulative distance, and summarizes them for the Route
Difficulty Index:
- Total distance and D+
- Min/max elevation
- Map centre (point nearest half distance)
- Optional Savitzky-Golay elevation smoothing for noisy tracks
- Gradient segments, climbs and descents for the route chart
"""

from dataclasses import asdict, dataclass
from enum import Enum
from math import asin, cos, radians, sin, sqrt
from typing import Any, Dict, List, Optional

import gpxpy
from scipy import signal

from ..config import round_half_up


class GradientBand(Enum):
    """Gradient bands used to colour the route profile"""

    DESCENT = "descent"  # < -1%
    FLAT = "flat"  # -1% to 3%
    EASY = "easy"  # 3-5%
    MODERATE = "moderate"  # 5-8%
    HARD = "hard"  # 8-12%
    EXTREME = "extreme"  # >= 12%


def gradient_band(gradient_percent: float) -> GradientBand:
    """Categorize a segment gradient into its band"""
    if gradient_percent < -1:
        return GradientBand.DESCENT
    elif gradient_percent < 3:
        return GradientBand.FLAT
    elif gradient_percent < 5:
        return GradientBand.EASY
    elif gradient_percent < 8:
        return GradientBand.MODERATE
    elif gradient_percent < 12:
        return GradientBand.HARD
    else:
        return GradientBand.EXTREME


@dataclass
class RoutePoint:
    """Represents a point on the route"""
    lat: float
    lon: float
    elevation: float
    distance_from_start_m: float


@dataclass
class RouteSummary:
    """Aggregate figures for a route"""
    total_distance_km: float
    total_elevation_gain_m: float
    total_elevation_loss_m: float
    min_elevation_m: float
    max_elevation_m: float
    center_lat: float
    center_lon: float
    points_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GradientSegment:
    """Stretch of route between two sampled points"""
    start_index: int
    end_index: int
    start_distance_km: float
    end_distance_km: float
    gradient_percent: float
    band: GradientBand

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['band'] = self.band.value
        return result


@dataclass
class ClimbSegment:
    """A detected climb, valley to summit"""
    name: str
    start_index: int
    end_index: int
    start_distance_km: float
    end_distance_km: float
    elevation_gain_m: int
    length_km: float
    avg_gradient_percent: float
    max_gradient_percent: float
    start_elevation_m: int
    end_elevation_m: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DescentSegment:
    """A detected descent, summit to valley"""
    start_index: int
    end_index: int
    start_distance_km: float
    end_distance_km: float
    elevation_drop_m: int
    length_km: float
    avg_gradient_percent: float  # negative

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RouteProfile:
    """Ordered route points with cumulative distance"""

    # Savitzky-Golay window (points) and polynomial order
    SMOOTHING_WINDOW = 5
    SMOOTHING_POLYORDER = 2

    # Gradient segments: moving-average window and max segment count
    GRADIENT_WINDOW = 5
    MAX_GRADIENT_SEGMENTS = 200
    MIN_SEGMENT_DISTANCE_M = 1.0

    # Climb and descent detection
    MIN_POINTS_FOR_CLIMBS = 10
    CLIMB_MIN_GAIN_M = 35.0
    DESCENT_MIN_DROP_M = 40.0
    CLIMB_MIN_LENGTH_M = 150.0
    CLIMB_MIN_AVG_GRADIENT = 1.5
    SPLIT_MIN_DROP_M = 30.0  # a climb ends after dropping max(30m, 20% of its gain)
    SPLIT_DROP_FRACTION = 0.2
    ADAPTIVE_WINDOW_M = 500.0
    ADAPTIVE_WINDOW_MIN = 5
    ADAPTIVE_WINDOW_MAX = 80

    def __init__(self, points: List[RoutePoint], name: Optional[str] = None):
        """
        Initialize profile from already-computed points.

        Args:
            points: Points in route order, distance_from_start_m filled in
            name: Optional route name
        """
        self.points = points
        self.name = name

    @classmethod
    def from_gpx(cls, gpx_content: str, smooth: bool = False) -> "RouteProfile":
        """
        Parse GPX content into a profile.

        Track points are used when present, route points otherwise.

        Args:
            gpx_content: Raw GPX file content as string
            smooth: Apply elevation smoothing before summarizing

        Returns:
            RouteProfile

        Raises:
            ValueError: if the file holds no track or route points
        """
        gpx = gpxpy.parse(gpx_content)

        raw_points = [
            point
            for track in gpx.tracks
            for segment in track.segments
            for point in segment.points
        ]
        if not raw_points:
            raw_points = [point for route in gpx.routes for point in route.points]

        if not raw_points:
            raise ValueError("No track or route points found in GPX")

        name = None
        for item in list(gpx.tracks) + list(gpx.routes):
            if item.name:
                name = item.name
                break

        return cls.from_coordinates(
            [(p.latitude, p.longitude, p.elevation) for p in raw_points],
            name=name,
            smooth=smooth,
        )

    @classmethod
    def from_coordinates(
        cls,
        coordinates: List[tuple],
        name: Optional[str] = None,
        smooth: bool = False,
    ) -> "RouteProfile":
        """
        Build a profile from (lat, lon, elevation) tuples.

        Missing elevations are treated as 0.
        """
        points: List[RoutePoint] = []
        cumulative_distance = 0.0
        prev = None

        for lat, lon, elevation in coordinates:
            if prev is not None:
                cumulative_distance += cls._haversine_distance(
                    prev[0], prev[1], lat, lon
                )

            points.append(RoutePoint(
                lat=lat,
                lon=lon,
                elevation=elevation or 0.0,
                distance_from_start_m=cumulative_distance,
            ))
            prev = (lat, lon)

        if smooth:
            smoothed = cls._smooth_elevation([p.elevation for p in points])
            for point, elevation in zip(points, smoothed):
                point.elevation = elevation

        return cls(points, name=name)

    @staticmethod
    def _haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """
        Calculate the great-circle distance between two points.

        Args:
            lat1, lon1: First point coordinates (degrees)
            lat2, lon2: Second point coordinates (degrees)

        Returns:
            Distance in meters
        """
        R = 6371000  # Earth's radius in meters

        lat1_rad = radians(lat1)
        lat2_rad = radians(lat2)
        delta_lat = radians(lat2 - lat1)
        delta_lon = radians(lon2 - lon1)

        a = sin(delta_lat / 2) ** 2 + cos(lat1_rad) * cos(lat2_rad) * sin(delta_lon / 2) ** 2
        c = 2 * asin(sqrt(a))

        return R * c

    @classmethod
    def _smooth_elevation(cls, elevations: List[float]) -> List[float]:
        """Savitzky-Golay smoothing; short series are returned unchanged"""
        window = cls.SMOOTHING_WINDOW
        if len(elevations) < window:
            return list(elevations)

        smoothed = signal.savgol_filter(
            elevations, window_length=window, polyorder=cls.SMOOTHING_POLYORDER
        )
        return smoothed.tolist()

    def get_total_distance_km(self) -> float:
        """Get total route distance in kilometers"""
        if not self.points:
            return 0.0
        return self.points[-1].distance_from_start_m / 1000

    def get_elevation_stats(self) -> Dict[str, float]:
        """
        Calculate total elevation gain and loss.

        Returns:
            Dict with elevation_gain_m and elevation_loss_m
        """
        gain = 0.0
        loss = 0.0

        for prev, point in zip(self.points, self.points[1:]):
            diff = point.elevation - prev.elevation
            if diff > 0:
                gain += diff
            else:
                loss += abs(diff)

        return {
            'elevation_gain_m': gain,
            'elevation_loss_m': loss,
        }

    def find_center_point(self) -> RoutePoint:
        """Point closest to half the total distance"""
        if not self.points:
            raise ValueError("No points in route")

        half_m = self.points[-1].distance_from_start_m / 2
        return min(self.points, key=lambda p: abs(p.distance_from_start_m - half_m))

    def summary(self) -> RouteSummary:
        """
        Summarize the route.

        Returns:
            RouteSummary with distance rounded to 0.1km and elevations to 1m
        """
        if not self.points:
            raise ValueError("No points in route")

        stats = self.get_elevation_stats()
        elevations = [p.elevation for p in self.points]
        center = self.find_center_point()

        return RouteSummary(
            total_distance_km=round(self.get_total_distance_km(), 1),
            total_elevation_gain_m=round(stats['elevation_gain_m']),
            total_elevation_loss_m=round(stats['elevation_loss_m']),
            min_elevation_m=round(min(elevations)),
            max_elevation_m=round(max(elevations)),
            center_lat=center.lat,
            center_lon=center.lon,
            points_count=len(self.points),
        )

    def get_elevation_profile(self, num_points: int = 100) -> List[Dict[str, float]]:
        """
        Get elevation profile data for charting.

        Args:
            num_points: Number of intervals to sample

        Returns:
            List of dicts with distanceKm and elevation
        """
        if not self.points or num_points <= 0:
            return []

        total_distance = self.points[-1].distance_from_start_m
        step = total_distance / num_points

        profile = []
        for i in range(num_points + 1):
            target_dist = i * step
            point = min(
                self.points, key=lambda p: abs(p.distance_from_start_m - target_dist)
            )
            profile.append({
                'distanceKm': round(target_dist / 1000, 2),
                'elevation': round(point.elevation, 1),
            })

        return profile

    @staticmethod
    def _moving_average(elevations: List[float], window: int) -> List[float]:
        """Centred moving average, the window shrinks at both ends"""
        half = window // 2
        last = len(elevations) - 1
        result = []

        for i in range(len(elevations)):
            start = max(0, i - half)
            end = min(last, i + half)
            values = elevations[start:end + 1]
            result.append(sum(values) / len(values))

        return result

    def _adaptive_window(self) -> int:
        """Smoothing window covering roughly 500m whatever the point density"""
        spacing_m = self.points[-1].distance_from_start_m / len(self.points)
        window = round_half_up(self.ADAPTIVE_WINDOW_M / max(spacing_m, 1.0))
        return max(self.ADAPTIVE_WINDOW_MIN, min(self.ADAPTIVE_WINDOW_MAX, window))

    def get_gradient_segments(
        self, smooth_window: Optional[int] = None
    ) -> List[GradientSegment]:
        """
        Split the route into gradient segments for the coloured profile.

        Consecutive points are grouped so that long tracks give at most
        MAX_GRADIENT_SEGMENTS segments. Segments shorter than 1m are skipped.

        Args:
            smooth_window: Moving-average window in points (default 5)

        Returns:
            List of GradientSegment in route order
        """
        count = len(self.points)
        if count < 2:
            return []

        smoothed = self._moving_average(
            [p.elevation for p in self.points], smooth_window or self.GRADIENT_WINDOW
        )
        step = max(1, count // self.MAX_GRADIENT_SEGMENTS)

        segments = []
        for start in range(0, count - step, step):
            end = min(start + step, count - 1)
            distance_m = (
                self.points[end].distance_from_start_m
                - self.points[start].distance_from_start_m
            )
            if distance_m < self.MIN_SEGMENT_DISTANCE_M:
                continue

            gradient = (smoothed[end] - smoothed[start]) / distance_m * 100
            segments.append(GradientSegment(
                start_index=start,
                end_index=end,
                start_distance_km=round(self.points[start].distance_from_start_m / 1000, 3),
                end_distance_km=round(self.points[end].distance_from_start_m / 1000, 3),
                gradient_percent=round(gradient, 1),
                band=gradient_band(gradient),
            ))

        return segments

    def _max_gradient(self, smoothed: List[float], start: int, end: int) -> float:
        """Steepest point-to-point gradient between two indices (0 if none)"""
        steepest = 0.0
        for j in range(start + 1, end + 1):
            distance_m = (
                self.points[j].distance_from_start_m
                - self.points[j - 1].distance_from_start_m
            )
            if distance_m > self.MIN_SEGMENT_DISTANCE_M:
                steepest = max(steepest, (smoothed[j] - smoothed[j - 1]) / distance_m * 100)
        return steepest

    def get_climbs(self, min_gain_m: Optional[float] = None) -> List[ClimbSegment]:
        """
        Detect climbs by tracking the running valley and peak.

        A climb closes once the route drops max(30m, 20% of the climb's
        gain) below its peak, so small dips inside a long climb do not
        split it. Climbs shorter than 150m or flatter than 1.5% on average
        are discarded.

        Args:
            min_gain_m: Minimum smoothed elevation gain (default 35m)

        Returns:
            List of ClimbSegment in route order, named "Climb 1", "Climb 2"...
        """
        if len(self.points) < self.MIN_POINTS_FOR_CLIMBS:
            return []

        min_gain = self.CLIMB_MIN_GAIN_M if min_gain_m is None else min_gain_m
        smoothed = self._moving_average(
            [p.elevation for p in self.points], self._adaptive_window()
        )
        distances = [p.distance_from_start_m for p in self.points]
        climbs: List[ClimbSegment] = []

        def record(valley: int, peak: int) -> None:
            gain = smoothed[peak] - smoothed[valley]
            if gain < min_gain or peak <= valley:
                return

            length_m = distances[peak] - distances[valley]
            if length_m <= self.CLIMB_MIN_LENGTH_M:
                return

            avg_gradient = gain / length_m * 100
            if avg_gradient < self.CLIMB_MIN_AVG_GRADIENT:
                return

            climbs.append(ClimbSegment(
                name=f"Climb {len(climbs) + 1}",
                start_index=valley,
                end_index=peak,
                start_distance_km=round(distances[valley] / 1000, 3),
                end_distance_km=round(distances[peak] / 1000, 3),
                elevation_gain_m=round(gain),
                length_km=round(length_m / 1000, 1),
                avg_gradient_percent=round(avg_gradient, 1),
                max_gradient_percent=round(self._max_gradient(smoothed, valley, peak), 1),
                start_elevation_m=round(smoothed[valley]),
                end_elevation_m=round(smoothed[peak]),
            ))

        valley = peak = 0
        for i in range(1, len(smoothed)):
            elevation = smoothed[i]
            gain = smoothed[peak] - smoothed[valley]
            drop = smoothed[peak] - elevation
            threshold = max(self.SPLIT_MIN_DROP_M, gain * self.SPLIT_DROP_FRACTION)

            if peak > valley and gain >= min_gain and drop >= threshold:
                record(valley, peak)

                # Restart from the lowest point since the summit, then the
                # highest point after it
                valley = min(range(peak, i + 1), key=lambda j: (smoothed[j], j))
                peak = max(range(valley, i + 1), key=lambda j: (smoothed[j], -j))

            if elevation < smoothed[valley]:
                if peak > valley and gain >= min_gain:
                    record(valley, peak)
                valley = peak = i
            elif elevation > smoothed[peak]:
                peak = i

        if peak > valley:
            record(valley, peak)

        return climbs

    def get_descents(self, min_drop_m: Optional[float] = None) -> List[DescentSegment]:
        """
        Detect descents, mirroring climb detection.

        Args:
            min_drop_m: Minimum smoothed elevation drop (default 40m)

        Returns:
            List of DescentSegment in route order
        """
        if len(self.points) < self.MIN_POINTS_FOR_CLIMBS:
            return []

        min_drop = self.DESCENT_MIN_DROP_M if min_drop_m is None else min_drop_m
        smoothed = self._moving_average(
            [p.elevation for p in self.points], self._adaptive_window()
        )
        distances = [p.distance_from_start_m for p in self.points]
        descents: List[DescentSegment] = []

        def record(peak: int, valley: int) -> None:
            drop = smoothed[peak] - smoothed[valley]
            if drop < min_drop or valley <= peak:
                return

            length_m = distances[valley] - distances[peak]
            if length_m <= self.CLIMB_MIN_LENGTH_M:
                return

            descents.append(DescentSegment(
                start_index=peak,
                end_index=valley,
                start_distance_km=round(distances[peak] / 1000, 3),
                end_distance_km=round(distances[valley] / 1000, 3),
                elevation_drop_m=round(drop),
                length_km=round(length_m / 1000, 1),
                avg_gradient_percent=round(-drop / length_m * 100, 1),
            ))

        peak = valley = 0
        for i in range(1, len(smoothed)):
            elevation = smoothed[i]
            drop = smoothed[peak] - smoothed[valley]
            rise = elevation - smoothed[valley]
            threshold = max(self.SPLIT_MIN_DROP_M, drop * self.SPLIT_DROP_FRACTION)

            if valley > peak and drop >= min_drop and rise >= threshold:
                record(peak, valley)

                peak = max(range(valley, i + 1), key=lambda j: (smoothed[j], -j))
                valley = min(range(peak, i + 1), key=lambda j: (smoothed[j], j))

            if elevation > smoothed[peak]:
                if valley > peak and drop >= min_drop:
                    record(peak, valley)
                peak = valley = i
            elif elevation < smoothed[valley]:
                valley = i

        if valley > peak:
            record(peak, valley)

        return descents
