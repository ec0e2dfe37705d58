"""EMCAL analysis tasks."""

from .clusterize import *
