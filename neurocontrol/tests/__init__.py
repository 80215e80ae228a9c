"""
Tests for the control core.

Covers the network substrate, the genetic evolution engine, the
replay buffer and DQN agent, the training driver and the plotting
helpers.
"""
