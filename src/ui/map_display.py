from typing import List, Optional
import pydeck as pdk
from pydeck.data_utils import compute_view
import streamlit as st
from models.models import Popup, Ring, TaskResult
from utils.constants import DEFAULT_MAP_CENTER, DEFAULT_MAP_ZOOM

# pydeck expects [lng, lat]


def build_deck(polygons: Optional[List[Ring]] = None, popups: Optional[List[Popup]] = None) -> pdk.Deck:
    polygons = [ring for ring in polygons or [] if ring]
    popups = popups or []
    layers = []
    points = []

    if polygons:
        data = [{"polygon": [[lng, lat] for lat, lng in ring]} for ring in polygons]
        layers.append(
            pdk.Layer(
                "PolygonLayer",
                data=data,
                get_polygon="polygon",
                get_fill_color=[30, 120, 220, 80],
                get_line_color=[30, 120, 220],
                line_width_min_pixels=2,
                pickable=False,
            )
        )
        points.extend(point for item in data for point in item["polygon"])

    if popups:
        data = [
            {"position": [p.position.lng, p.position.lat], "content": p.content}
            for p in popups
        ]
        layers.append(
            pdk.Layer(
                "ScatterplotLayer",
                data=data,
                get_position="position",
                get_fill_color=[220, 60, 40],
                radius_min_pixels=6,
                pickable=True,
            )
        )
        points.extend(item["position"] for item in data)

    if points:
        view_state = compute_view(points)
    else:
        view_state = pdk.ViewState(
            latitude=DEFAULT_MAP_CENTER[0],
            longitude=DEFAULT_MAP_CENTER[1],
            zoom=DEFAULT_MAP_ZOOM,
        )

    return pdk.Deck(
        layers=layers,
        initial_view_state=view_state,
        map_style="light",
        tooltip={"text": "{content}"} if popups else False,
    )


def render_map(polygons: Optional[List[Ring]] = None, popups: Optional[List[Popup]] = None):
    st.pydeck_chart(build_deck(polygons, popups), height=320)


def render_result_map(result: TaskResult):
    render_map(result.polygons, result.popups)
