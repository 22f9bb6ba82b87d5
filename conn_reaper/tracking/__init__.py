from .table import TrackingTable
from .reconcile import CycleReport, Reconciler
