"""
Career Services

- SuccessionService: Succession plans, candidate discovery, score refresh and risk
- CareerPathService: Career paths, their skill bars, readiness and roadmaps
"""
