"""Kubernetes and EKS on Fargate support through the kubelet."""