"""Worked solutions to a selection of the course exercises."""