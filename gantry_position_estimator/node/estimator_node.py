"""
Gantry Position Estimator Node.

Subscribes to aruco marker transforms, keeps the FrameEstimator up to date
and publishes the derived frames:

    /aruco (TransformStamped)            -> FrameEstimator.observe
    timer @ publish_period_sec           -> sweep stale markers, publish
        /rita/tf, /tf (TFMessage)           live: facade_aruco, gantry_aruco, agv_aruco
        /rita/tf, /tf (TFMessage)           locked: facade_locked, gantry_locked
        measured (Bool)                     facade and gantry both available
    trigger (std_srvs/Trigger)           -> FrameEstimator.lock
    ~/status (String, JSON)              -> counters every status_period_sec

Callbacks run on a MultiThreadedExecutor with a reentrant callback group;
the estimator serializes access to its state. A failed publish is logged
and the tick goes on.
"""

import json
from typing import Any, Dict, List, Optional

import rclpy
from rclpy.callback_groups import ReentrantCallbackGroup
from rclpy.executors import MultiThreadedExecutor
from rclpy.node import Node
from rclpy.qos import DurabilityPolicy, HistoryPolicy, QoSProfile, ReliabilityPolicy

from geometry_msgs.msg import TransformStamped
from std_msgs.msg import Bool, String
from std_srvs.srv import Trigger
from tf2_msgs.msg import TFMessage

from gantry_position_estimator.common.pose import Stamp
from gantry_position_estimator.config import EstimatorConfig, declare_parameters
from gantry_position_estimator.estimator.markers import EVENT_REJECTED, MarkerEvent, MarkerId
from gantry_position_estimator.estimator.state import FrameEstimator
from gantry_position_estimator.node.conversions import (
    pose_from_transform,
    poses_to_tf_message,
    stamp_from_msg,
)


class GantryPositionEstimator(Node):
    """ROS wrapper around FrameEstimator."""

    def __init__(self, parameter_overrides: Optional[Dict[str, Any]] = None) -> None:
        from rclpy.parameter import Parameter

        overrides = None
        if parameter_overrides:
            overrides = [Parameter(k, value=v) for k, v in parameter_overrides.items()]
        super().__init__("gantry_position_estimator", parameter_overrides=overrides)

        declare_parameters(self)
        self.config = EstimatorConfig.from_ros_node(self)
        self.config.validate()

        self.estimator = FrameEstimator(self.config)

        self._init_ros()
        self._log_startup_manifest()

    def _init_ros(self) -> None:
        """Initialize ROS interfaces."""
        topics = self.config.topics
        timing = self.config.timing

        qos = QoSProfile(
            reliability=ReliabilityPolicy.RELIABLE,
            durability=DurabilityPolicy.VOLATILE,
            history=HistoryPolicy.KEEP_LAST,
            depth=topics.qos_depth,
        )

        # Observations, the tick and the lock service may run concurrently.
        self._callback_group = ReentrantCallbackGroup()

        self.sub_aruco = self.create_subscription(
            TransformStamped,
            topics.input_topic,
            self.on_aruco,
            qos,
            callback_group=self._callback_group,
        )

        self.tf_pubs = [
            self.create_publisher(TFMessage, topic, qos) for topic in topics.tf_topics
        ]
        self.pub_ready = self.create_publisher(Bool, topics.ready_topic, qos)
        self.pub_status = self.create_publisher(String, topics.status_topic, qos)

        self.lock_srv = self.create_service(
            Trigger,
            topics.lock_service,
            self.on_trigger,
            callback_group=self._callback_group,
        )

        self.publish_timer = self.create_timer(
            timing.publish_period_sec,
            self._on_tick,
            callback_group=self._callback_group,
        )
        self.status_timer = self.create_timer(
            timing.status_period_sec,
            self._publish_status,
            callback_group=self._callback_group,
        )

    def _log_startup_manifest(self) -> None:
        topics = self.config.topics
        timing = self.config.timing
        geometry = self.config.geometry
        behavior = self.config.behavior

        manifest = {
            "node": str(self.get_name()),
            "input_topic": topics.input_topic,
            "tf_topics": list(topics.tf_topics),
            "ready_topic": topics.ready_topic,
            "status_topic": topics.status_topic,
            "lock_service": topics.lock_service,
            "publish_period_sec": timing.publish_period_sec,
            "stale_threshold_sec": timing.stale_threshold_sec,
            "smoothing_constant": geometry.smoothing_constant,
            "facade_height": geometry.facade_height,
            "gantry_height": geometry.gantry_height,
            "rederive_on_expiry": behavior.rederive_on_expiry,
            "clear_agv_when_stale": behavior.clear_agv_when_stale,
            "enable_upright_check": behavior.enable_upright_check,
        }

        self.get_logger().info("=" * 60)
        self.get_logger().info("GANTRY POSITION ESTIMATOR")
        self.get_logger().info("=" * 60)
        self.get_logger().info(f"  subscribe: {topics.input_topic}")
        for topic in topics.tf_topics:
            self.get_logger().info(f"  publish tf: {topic}")
        self.get_logger().info(f"  publish ready: {topics.ready_topic}")
        self.get_logger().info(f"  lock service: {topics.lock_service}")
        self.get_logger().info(
            f"  stale after {timing.stale_threshold_sec}s, tick {timing.publish_period_sec}s"
        )
        if behavior.rederive_on_expiry or behavior.clear_agv_when_stale:
            self.get_logger().warn(
                "  non-default staleness handling: "
                f"rederive_on_expiry={behavior.rederive_on_expiry}, "
                f"clear_agv_when_stale={behavior.clear_agv_when_stale}"
            )
        if behavior.enable_upright_check:
            self.get_logger().info(
                f"  upright check: tilt<{behavior.upright_max_tilt}, z>{behavior.upright_min_z}"
            )
        self.get_logger().info("=" * 60)
        self.get_logger().debug(json.dumps(manifest))

    # -------------------------------------------------------------------------
    # Callbacks
    # -------------------------------------------------------------------------

    def on_aruco(self, msg: TransformStamped) -> None:
        if MarkerId.from_frame_name(msg.child_frame_id) is None:
            self.get_logger().debug(f"ignoring {msg.child_frame_id}")
        self._log_events(self.estimator.observe(pose_from_transform(msg)))

    def on_trigger(self, request: Trigger.Request, response: Trigger.Response) -> Trigger.Response:
        result = self.estimator.lock()
        self.get_logger().info(f"lock requested: {result.message}")

        response.success = True
        response.message = result.message
        return response

    def _on_tick(self) -> None:
        now = self._now()

        # check and remove stale transformations
        self._log_events(self.estimator.sweep(now))

        publication = self.estimator.publication(now)

        live_msg = poses_to_tf_message(publication.live)
        locked_msg = poses_to_tf_message(publication.locked)
        for pub in self.tf_pubs:
            self._publish(pub, live_msg)
        for pub in self.tf_pubs:
            self._publish(pub, locked_msg)

        ready = Bool()
        ready.data = bool(publication.ready)
        self._publish(self.pub_ready, ready)

    def _publish_status(self) -> None:
        msg = String()
        msg.data = json.dumps(self.estimator.status())
        self._publish(self.pub_status, msg)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _now(self) -> Stamp:
        return stamp_from_msg(self.get_clock().now().to_msg())

    def _publish(self, pub, msg) -> None:
        try:
            pub.publish(msg)
        except Exception as exc:
            self.get_logger().warn(f"could not publish on {pub.topic_name}: {exc}")

    def _log_events(self, events: List[MarkerEvent]) -> None:
        for event in events:
            if event.kind == EVENT_REJECTED:
                self.get_logger().warn(event.describe())
            else:
                self.get_logger().info(event.describe())


def main() -> None:
    rclpy.init()
    node = GantryPositionEstimator()

    executor = MultiThreadedExecutor(num_threads=node.config.timing.executor_threads)
    executor.add_node(node)

    try:
        executor.spin()
    except KeyboardInterrupt:
        pass
    finally:
        node.destroy_node()
        rclpy.shutdown()


if __name__ == "__main__":
    main()
