# Durable cart service
