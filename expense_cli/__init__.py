"""Console front end for the expense tracker."""
