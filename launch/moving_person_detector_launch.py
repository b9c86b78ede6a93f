#!/usr/bin/env python3
"""
ROS2 Launch file for the moving person detector.

Launches:
    1. moving_person_detector_node.py - moving person detection from /scan + /robot_moving

Parameters are loaded from config/<DETECTOR_CONFIG>.yaml, where the
DETECTOR_CONFIG environment variable defaults to detector_params.

Usage:
    export DETECTOR_CONFIG=detector_params   # optional
    pip install -e .
    ros2 launch launch/moving_person_detector_launch.py
"""

import os

from launch import LaunchDescription
from launch.actions import (
    ExecuteProcess,
    LogInfo,
    TimerAction,
)


def generate_launch_description():
    """Generate the launch description for the moving person detector."""
    launch_file_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(launch_file_dir)

    config_name = os.environ.get("DETECTOR_CONFIG", "detector_params")
    config_file = os.path.join(project_root, "config", f"{config_name}.yaml")

    if not os.path.exists(config_file):
        raise FileNotFoundError(
            f"Detector config not found: {config_file}\n"
            f"Set DETECTOR_CONFIG environment variable and create config/<DETECTOR_CONFIG>.yaml"
        )

    detector_cmd = TimerAction(
        period=0.0,
        actions=[
            ExecuteProcess(
                cmd=[
                    "bash",
                    "-c",
                    f"source /opt/ros/jazzy/setup.bash && "
                    f"cd {project_root} && "
                    f"python3 -m moving_person_detector.nodes.moving_person_detector_node "
                    f"--ros-args --params-file {config_file}",
                ],
                name="moving_person_detector",
                output="screen",
            )
        ],
    )

    return LaunchDescription(
        [
            LogInfo(msg=f"Starting Moving Person Detector ({config_name})..."),
            detector_cmd,
        ]
    )
