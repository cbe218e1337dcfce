"""
Gantry position estimator launch.

Runs the estimator node with the packaged parameter file. Override the
file with `params_file:=...`, or flip the staleness hardening flags
directly from the command line.
"""
import os

from ament_index_python.packages import get_package_share_directory
from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def generate_launch_description():
    default_params = os.path.join(
        get_package_share_directory("gantry_position_estimator"),
        "config",
        "gantry_position_estimator.yaml",
    )

    params_file = LaunchConfiguration("params_file")
    rederive_on_expiry = LaunchConfiguration("rederive_on_expiry")
    clear_agv_when_stale = LaunchConfiguration("clear_agv_when_stale")

    return LaunchDescription([
        DeclareLaunchArgument("params_file", default_value=default_params,
            description="Estimator parameter file"),
        DeclareLaunchArgument("rederive_on_expiry", default_value="false",
            description="Recompute facade/gantry when a marker goes stale"),
        DeclareLaunchArgument("clear_agv_when_stale", default_value="false",
            description="Drop the agv frame when marker 5 goes stale"),

        # Reads: /aruco
        # Publishes: /rita/tf, /tf, measured, ~/status
        # Serves: trigger (std_srvs/Trigger)
        Node(
            package="gantry_position_estimator",
            executable="gantry_position_estimator_node",
            name="gantry_position_estimator",
            output="screen",
            parameters=[
                params_file,
                {
                    "rederive_on_expiry": rederive_on_expiry,
                    "clear_agv_when_stale": clear_agv_when_stale,
                },
            ],
        ),
    ])
