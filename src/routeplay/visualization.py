#!/usr/bin/env python3
"""
Route replay visualization using folium maps.
"""

from typing import List, Optional
import logging
import folium
from folium.template import Template

from .driver import RenderFrame
from .formatting import Readout
from .geometry import Position
from .route import Route

logger = logging.getLogger(__name__)

FULL_PATH_COLOR = "#9CA3AF"
TRAVELED_PATH_COLOR = "#2563eb"

CAR_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="36" height="36" viewBox="0 0 24 24">'
    '<path fill="#2563eb" d="M3 11.5C3 9.57 4.57 8 6.5 8h11c1.93 0 3.5 1.57 3.5 3.5V18h-1.5v2h-1v-2H5v2H4v-2H2.5v-6.5z'
    "M6.5 10C5.67 10 5 10.67 5 11.5S5.67 13 6.5 13 8 12.33 8 11.5 7.33 10 6.5 10z"
    'M17.5 10c-.83 0-1.5.67-1.5 1.5S16.67 13 17.5 13 19 12.33 19 11.5 18.33 10 17.5 10z"/>'
    "</svg>"
)


class ReplayLegend(folium.MacroElement):
    """Legend showing the path colors and the readout at the rendered instant."""

    def __init__(self, readout: Optional[Readout] = None, synthetic_timing: bool = False):
        super().__init__()
        self.elapsed = readout.elapsed if readout else "00:00:00"
        self.coordinate = readout.coordinate if readout else ""
        self.speed = readout.speed if readout else "0.00 km/h"
        self.distance = readout.distance if readout else "0.0 m"
        self.synthetic_timing = synthetic_timing

        self._template = Template(
            """
        {% macro html(this, kwargs) %}
        <div id="replay-legend" style="
            position: fixed;
            bottom: 50px;
            left: 50px;
            width: 260px;
            background-color: white;
            border: 2px solid grey;
            z-index: 9999;
            font-size: 13px;
            padding: 12px;
            font-family: Arial, sans-serif;
            border-radius: 5px;
            box-shadow: 0 2px 5px rgba(0,0,0,0.2);
            box-sizing: border-box;
        ">
            <b>Legend</b><br>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #9CA3AF; font-weight: bold; font-size: 18px;">—</span>
                Recorded Route
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                <span style="color: #2563eb; font-weight: bold; font-size: 18px;">—</span>
                Traveled Path
            </div>
            <div style="margin: 4px 0; line-height: 1.3;">
                <b>Elapsed:</b> {{ this.elapsed }}<br>
                <b>Position:</b> {{ this.coordinate }}<br>
                <b>Speed:</b> {{ this.speed }}<br>
                <b>Distance:</b> {{ this.distance }}
            </div>
            {% if this.synthetic_timing %}
            <div style="margin: 4px 0; line-height: 1.3; color: #B45309;">
                Timestamps missing: synthetic fixed intervals
            </div>
            {% endif %}
        </div>
        {% endmacro %}
        """
        )


class FoliumRenderSink:
    """Collects rendered frames and writes them out as a folium map."""

    def __init__(self, route: Route, map_buffer: float = 50.0):
        self.route = route
        self.map_buffer = map_buffer
        self.full_path: List[Position] = list(route.positions)
        self.traveled_path: List[Position] = [route.first.position]
        self.marker: Position = route.first.position

    def render(self, frame: RenderFrame) -> None:
        self.full_path = frame.full_path
        self.marker = frame.coordinate
        if frame.traveled_append is not None:
            self.traveled_path.append(frame.traveled_append)

    def reset(self, start: Position) -> None:
        self.traveled_path = [start]
        self.marker = start

    def save(self, output_filename: str, readout: Optional[Readout] = None) -> None:
        """
        Write the route, traveled path and vehicle marker to an HTML map.

        Args:
            output_filename: Path where HTML map file should be saved
            readout: Readout shown in the legend
        """
        south, west, north, east = self.route.get_bbox(self.map_buffer)

        center_lat = (south + north) / 2
        center_lon = (west + east) / 2

        logger.debug(f"Creating map centered at ({center_lat:.4f}, {center_lon:.4f})")

        replay_map = folium.Map(
            location=[center_lat, center_lon],
            tiles=None,
        )

        folium.TileLayer(
            tiles="OpenStreetMap",
            attr="&copy; <a href='https://www.openstreetmap.org/copyright'>OpenStreetMap</a> contributors",
            name="Standard",
            control=True,
            show=True,
        ).add_to(replay_map)

        folium.TileLayer(
            tiles="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
            attr=(
                "Tiles &copy; Esri &mdash; Source: Esri, i-cubed, USDA, USGS, AEX, GeoEye, "
                "Getmapping, Aerogrid, IGN, IGP, UPR-EGP, and the GIS User Community"
            ),
            name="Satellite",
            control=True,
            show=False,
        ).add_to(replay_map)

        folium.LayerControl().add_to(replay_map)

        folium.PolyLine(
            [[pos.latitude, pos.longitude] for pos in self.full_path],
            color=FULL_PATH_COLOR,
            weight=4,
            opacity=0.6,
            popup="Recorded Route",
        ).add_to(replay_map)

        if len(self.traveled_path) > 1:
            folium.PolyLine(
                [[pos.latitude, pos.longitude] for pos in self.traveled_path],
                color=TRAVELED_PATH_COLOR,
                weight=4,
                popup="Traveled Path",
            ).add_to(replay_map)

        first, last = self.route.first, self.route.last
        folium.Marker(
            [first.latitude, first.longitude],
            popup="Start",
            icon=folium.Icon(color="green", icon="play"),
        ).add_to(replay_map)

        folium.Marker(
            [last.latitude, last.longitude],
            popup="End",
            icon=folium.Icon(color="red", icon="stop"),
        ).add_to(replay_map)

        folium.Marker(
            [self.marker.latitude, self.marker.longitude],
            popup=readout.coordinate if readout else "Vehicle",
            icon=folium.DivIcon(html=CAR_SVG, icon_size=(36, 36), icon_anchor=(18, 18)),
        ).add_to(replay_map)

        replay_map.add_child(ReplayLegend(readout, self.route.synthetic_timing))

        replay_map.fit_bounds([[south, west], [north, east]])

        replay_map.save(output_filename)

        logger.info(
            f"Map saved to {output_filename} with {len(self.traveled_path)} traveled path points"
        )
