"""
Gantry position estimator.

Fuses aruco marker observations into facade, gantry and agv frames and
locks the facade/gantry pair on request.
"""
