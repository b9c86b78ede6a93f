#!/usr/bin/env python3
"""
ROS 2 node detecting moving persons around a stationary robot from a 2D LiDAR.

Subscribes
----------
scan         : sensor_msgs/LaserScan
robot_moving : std_msgs/Bool

Publishes
---------
goal_to_reach          : geometry_msgs/Point
  Middle of the last moving person found in the scan. Only published
  when at least one person is detected.
moving_person_detector : visualization_msgs/Marker
  id 0: cluster bounds (green/red), moving legs (white), persons (yellow)
  id 1: field of view of the scanner

The node runs a fixed-rate loop (loop_hz). Callbacks only store the latest
message of each topic; the pipeline runs once per tick on what was received.

Usage:
    python3 -m moving_person_detector.nodes.moving_person_detector_node \\
        --ros-args --params-file config/detector_params.yaml
"""

from __future__ import annotations

import logging
import time
from dataclasses import fields
from typing import List, Tuple

import rclpy
from geometry_msgs.msg import Point
from rclpy.node import Node
from rclpy.qos import HistoryPolicy, QoSProfile, ReliabilityPolicy
from sensor_msgs.msg import LaserScan
from std_msgs.msg import Bool, ColorRGBA
from visualization_msgs.msg import Marker

from moving_person_detector.config import DetectorConfig
from moving_person_detector.detection.pipeline import DetectionPipeline, DetectionResult
from moving_person_detector.utils.mailbox import Mailbox
from moving_person_detector.utils.visualization import (
    DisplayPoint,
    build_display_points,
    field_of_view_polyline,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("moving_person_detector_node")


class MovingPersonDetectorNode(Node):
    """ROS 2 wrapper around DetectionPipeline."""

    def __init__(self):
        """Initialize the detector node."""
        super().__init__("moving_person_detector")

        self._declare_parameters()
        self.config = self._load_parameters()
        self.pipeline = DetectionPipeline(self.config)

        self._scan_mailbox: Mailbox[LaserScan] = Mailbox()
        self._moving_mailbox: Mailbox[bool] = Mailbox()

        self._setup_publishers()
        self._setup_subscribers()

        self.goals_published = 0
        self._log_startup_info()

    def _declare_parameters(self):
        """Declare one ROS parameter per DetectorConfig field."""
        for name, value in DetectorConfig().as_dict().items():
            self.declare_parameter(name, value)

    def _load_parameters(self) -> DetectorConfig:
        """Build a validated DetectorConfig from parameter values."""
        values = {f.name: self.get_parameter(f.name).value for f in fields(DetectorConfig)}
        return DetectorConfig(**values)

    def _setup_publishers(self):
        """Create ROS publishers."""
        self.goal_publisher = self.create_publisher(Point, self.config.goal_topic, 1)
        self.marker_publisher = self.create_publisher(
            Marker, self.config.marker_topic, 1
        )

    def _setup_subscribers(self):
        """Create ROS subscribers."""
        scan_qos = QoSProfile(
            reliability=ReliabilityPolicy.BEST_EFFORT,
            history=HistoryPolicy.KEEP_LAST,
            depth=1,
        )
        self.scan_subscription = self.create_subscription(
            LaserScan, self.config.scan_topic, self.scan_callback, scan_qos
        )
        self.robot_moving_subscription = self.create_subscription(
            Bool, self.config.robot_moving_topic, self.robot_moving_callback, 1
        )

    def _log_startup_info(self):
        cfg = self.config
        self.get_logger().info("Moving person detector started")
        self.get_logger().info(
            f"  Subscribing to: {cfg.scan_topic}, {cfg.robot_moving_topic}"
        )
        self.get_logger().info(
            f"  Publishing to: {cfg.goal_topic}, {cfg.marker_topic}"
        )
        self.get_logger().info(
            f"  cluster={cfg.cluster_threshold}m detection={cfg.detection_threshold}m "
            f"dynamic={cfg.dynamic_threshold}% leg=({cfg.leg_size_min}, "
            f"{cfg.leg_size_max})m legs_distance<{cfg.legs_distance_max}m "
            f"@ {cfg.loop_hz}Hz"
        )

    def scan_callback(self, msg: LaserScan):
        """Keep the latest scan for the next tick."""
        self._scan_mailbox.put(msg)

    def robot_moving_callback(self, msg: Bool):
        """Keep the latest robot_moving value for the next tick."""
        self._moving_mailbox.put(bool(msg.data))

    def update(self):
        """Run one detector tick on the messages received since the last one."""
        result = self.pipeline.tick(
            scan=self._scan_mailbox.take(),
            is_moving=self._moving_mailbox.take(),
        )
        if result is None:
            return

        self.publish_markers(result)

        if result.goal is not None:
            self.publish_goal(result.goal)

    def publish_goal(self, goal: Tuple[float, float]):
        """Publish the goal to reach."""
        msg = Point()
        msg.x = float(goal[0])
        msg.y = float(goal[1])
        msg.z = 0.0
        self.goal_publisher.publish(msg)
        self.goals_published += 1

    def publish_markers(self, result: DetectionResult):
        """Publish the detection display followed by the field of view."""
        stamp = self.get_clock().now().to_msg()
        self.marker_publisher.publish(
            self._points_marker(build_display_points(result), stamp)
        )
        cfg = self.config
        reference = field_of_view_polyline(
            cfg.fov_angle_min,
            cfg.fov_angle_max,
            cfg.fov_angle_increment,
            cfg.fov_num_beams,
            cfg.fov_max_range,
            cfg.fov_min_range,
        )
        self.marker_publisher.publish(self._reference_marker(reference, stamp))

    def _base_marker(self, marker_id: int, marker_type: int, stamp) -> Marker:
        marker = Marker()
        marker.header.frame_id = self.config.frame_id
        marker.header.stamp = stamp
        marker.ns = "moving_person_detector"
        marker.id = marker_id
        marker.type = marker_type
        marker.action = Marker.ADD
        marker.pose.orientation.w = 1.0
        return marker

    def _points_marker(self, display: List[DisplayPoint], stamp) -> Marker:
        marker = self._base_marker(0, Marker.POINTS, stamp)
        marker.scale.x = 0.05
        marker.scale.y = 0.05
        marker.color.a = 1.0
        for p in display:
            marker.points.append(Point(x=p.x, y=p.y, z=p.z))
            r, g, b, a = p.color
            marker.colors.append(ColorRGBA(r=r, g=g, b=b, a=a))
        return marker

    def _reference_marker(self, line: List[Tuple[float, float]], stamp) -> Marker:
        marker = self._base_marker(1, Marker.LINE_STRIP, stamp)
        marker.scale.x = 0.02
        marker.color.r = 1.0
        marker.color.g = 1.0
        marker.color.b = 1.0
        marker.color.a = 1.0
        for x, y in line:
            marker.points.append(Point(x=float(x), y=float(y), z=0.0))
        return marker

    def run(self):
        """
        Fixed-rate loop: tick, then spin callbacks until the next tick is due.

        A tick that runs late delays the next one instead of bursting.
        """
        period = 1.0 / self.config.loop_hz
        next_tick = time.monotonic()
        while rclpy.ok():
            self.update()
            next_tick += period
            now = time.monotonic()
            if now > next_tick:
                next_tick = now
            while rclpy.ok():
                remaining = next_tick - time.monotonic()
                if remaining <= 0.0:
                    break
                rclpy.spin_once(self, timeout_sec=remaining)


def main(args=None):
    """Entry point for the moving person detector node."""
    rclpy.init(args=args)
    node = MovingPersonDetectorNode()

    try:
        node.run()
    except KeyboardInterrupt:
        pass
    finally:
        logger.info(f"Shutting down ({node.goals_published} goals published)")
        node.destroy_node()
        if rclpy.ok():
            rclpy.shutdown()


if __name__ == "__main__":
    main()
