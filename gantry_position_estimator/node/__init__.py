"""
ROS 2 glue for the estimator: message conversions and the node.

Requires rclpy and the geometry_msgs/tf2_msgs/std_msgs/std_srvs interfaces.
"""
