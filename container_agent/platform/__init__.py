"""Runtime platforms the agent can observe: none, ECS and Kubernetes."""