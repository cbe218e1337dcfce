from setuptools import find_packages, setup

package_name = "gantry_position_estimator"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test"]),
    data_files=[
        ("share/ament_index/resource_index/packages", ["resource/" + package_name]),
        ("share/" + package_name, ["package.xml"]),
        (
            "share/" + package_name + "/launch",
            [
                "launch/gantry_position_estimator.launch.py",
            ],
        ),
        (
            "share/" + package_name + "/config",
            [
                "config/gantry_position_estimator.yaml",
            ],
        ),
    ],
    install_requires=["setuptools", "numpy", "scipy"],
    extras_require={"test": ["pytest", "pyyaml"]},
    zip_safe=True,
    maintainer="you",
    maintainer_email="you@example.com",
    description="Aruco marker fusion into facade/gantry/agv frames with frame locking (ROS 2)",
    license="Apache-2.0",
    tests_require=["pytest", "pyyaml"],
    entry_points={
        "console_scripts": [
            "gantry_position_estimator_node = gantry_position_estimator.node.estimator_node:main",
        ],
    },
)
