"""vSphere problem detector.

Run diagnostic checks against the vSphere platform backing a Kubernetes cluster
and report misconfigurations before they break the cluster.
"""

__version__ = "0.1.0"
__author__ = "Platform Engineering Team"
__license__ = "Apache-2.0"
