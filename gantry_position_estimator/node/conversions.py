"""
Conversions between ROS messages and estimator value types.
"""

from typing import Iterable

from builtin_interfaces.msg import Time
from geometry_msgs.msg import TransformStamped
from tf2_msgs.msg import TFMessage

from gantry_position_estimator.common.pose import Pose, Quaternion, Stamp, Vector3


def stamp_from_msg(msg: Time) -> Stamp:
    return Stamp(sec=int(msg.sec), nanosec=int(msg.nanosec))


def stamp_to_msg(stamp: Stamp) -> Time:
    msg = Time()
    msg.sec = int(stamp.sec)
    msg.nanosec = int(stamp.nanosec)
    return msg


def pose_from_transform(msg: TransformStamped) -> Pose:
    t = msg.transform.translation
    r = msg.transform.rotation
    return Pose(
        child_frame_id=str(msg.child_frame_id),
        translation=Vector3(x=float(t.x), y=float(t.y), z=float(t.z)),
        rotation=Quaternion(w=float(r.w), x=float(r.x), y=float(r.y), z=float(r.z)),
        frame_id=str(msg.header.frame_id),
        stamp=stamp_from_msg(msg.header.stamp),
    )


def pose_to_transform(pose: Pose) -> TransformStamped:
    msg = TransformStamped()
    msg.header.frame_id = pose.frame_id
    msg.header.stamp = stamp_to_msg(pose.stamp)
    msg.child_frame_id = pose.child_frame_id

    msg.transform.translation.x = float(pose.translation.x)
    msg.transform.translation.y = float(pose.translation.y)
    msg.transform.translation.z = float(pose.translation.z)
    msg.transform.rotation.w = float(pose.rotation.w)
    msg.transform.rotation.x = float(pose.rotation.x)
    msg.transform.rotation.y = float(pose.rotation.y)
    msg.transform.rotation.z = float(pose.rotation.z)
    return msg


def poses_to_tf_message(poses: Iterable[Pose]) -> TFMessage:
    msg = TFMessage()
    msg.transforms = [pose_to_transform(p) for p in poses]
    return msg
