"""CKS autoscaler command line interface."""
