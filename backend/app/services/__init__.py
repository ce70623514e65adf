# Redisbox Services
