"""Amazon ECS, Fargate and ECS Anywhere support through the task metadata endpoint."""